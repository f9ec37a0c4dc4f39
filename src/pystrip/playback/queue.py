from collections import deque
from typing import Deque, List, Optional, Sequence

from loguru import logger

from pystrip.stripview.data_store import validate_layer_lengths
from pystrip.stripview.errors import LayerMismatchError
from pystrip.stripview.series import DataPoint, Layer


class PlaybackQueue:
    """
    FIFO of layered batches waiting for the next idle tick.

    Producers may push arbitrarily far ahead; the playback engine releases
    one batch per idle tick, so the queue itself is unbounded.
    """

    def __init__(self, num_layers: int):
        self.num_layers = num_layers
        self._batches: Deque[List[Layer]] = deque()

    def __len__(self) -> int:
        return len(self._batches)

    def __bool__(self) -> bool:
        return bool(self._batches)

    def push(self, batch: Sequence[Sequence[DataPoint]]) -> None:
        """
        Enqueue a batch.

        Raises
        ------
        LayerMismatchError
            If the batch does not carry one layer per legend, or its layers
            differ in length.
        """
        if len(batch) != self.num_layers:
            raise LayerMismatchError(
                f"Batch has {len(batch)} layers, expected {self.num_layers}"
            )
        validate_layer_lengths(batch, context="pushed batch")
        self._batches.append([list(layer) for layer in batch])
        if len(self._batches) > 1:
            logger.debug(f"Playback queue backlog: {len(self._batches)} batches")

    def pop(self) -> Optional[List[Layer]]:
        """Release the oldest batch, or None when the queue is empty."""
        if not self._batches:
            return None
        return self._batches.popleft()

    def clear(self) -> None:
        self._batches.clear()
