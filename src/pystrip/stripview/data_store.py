from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .errors import LayerMismatchError
from .series import DataPoint, Layer, Timestamp


def validate_layer_lengths(layers: Sequence[Sequence[DataPoint]], context: str) -> None:
    """Raise LayerMismatchError unless every layer has the same length."""
    lengths = {len(layer) for layer in layers}
    if len(lengths) > 1:
        raise LayerMismatchError(
            f"All layers of the {context} must have the same length. Got {sorted(lengths)}"
        )


class RawSeriesStore:
    """
    Owns the full, ever-growing per-layer point sequences.

    Every layer holds one DataPoint per sample and all layers share the same
    length at all times. The store grows at both ends: live data is appended,
    history backfill is prepended.
    """

    def __init__(self, initial_data: Optional[Sequence[Sequence[DataPoint]]] = None):
        """
        Initialise the store.

        Parameters
        ----------
        initial_data : Optional[Sequence[Sequence[DataPoint]]], default=None
            One ordered sequence of points per layer. All layers must have the
            same length.

        Raises
        ------
        LayerMismatchError
            If the layers have different lengths.
        """
        self._layers: List[Layer] = [list(layer) for layer in (initial_data or [])]
        validate_layer_lengths(self._layers, context="initial data")
        for i, layer in enumerate(self._layers):
            self._check_time_order(layer, layer_idx=i)
        logger.debug(
            f"Store initialised with {self.num_layers} layers of {self.length()} points"
        )

    @property
    def layers(self) -> List[Layer]:
        return self._layers

    @property
    def num_layers(self) -> int:
        return len(self._layers)

    def length(self) -> int:
        """Number of samples per layer (length of layer 0)."""
        return len(self._layers[0]) if self._layers else 0

    def __len__(self) -> int:
        return self.length()

    def append(self, batch: Sequence[Sequence[DataPoint]]) -> None:
        """
        Concatenate a layered batch at the end of every layer.

        Parameters
        ----------
        batch : Sequence[Sequence[DataPoint]]
            One sequence per layer, in legend order.

        Raises
        ------
        LayerMismatchError
            If the batch layer count differs from the store's, or the batch
            layers differ in length.
        """
        self._check_batch(batch)
        for layer, points in zip(self._layers, batch):
            layer.extend(points)
        logger.debug(f"Appended {self._batch_length(batch)} points, store size {self.length()}")

    def prepend(self, batch: Sequence[Sequence[DataPoint]]) -> None:
        """Insert a layered batch in front of every layer (history backfill)."""
        self._check_batch(batch)
        for i, points in enumerate(batch):
            self._layers[i] = list(points) + self._layers[i]
        logger.debug(f"Prepended {self._batch_length(batch)} points, store size {self.length()}")

    def slice_range(self, start: int, stop: int) -> List[Layer]:
        """
        Return the per-layer slice ``[start, stop)``.

        Indices are clamped to the available data, so ranges reaching past
        either end of the history come back shorter than requested.
        """
        size = self.length()
        start = min(max(start, 0), size)
        stop = min(max(stop, start), size)
        return [layer[start:stop] for layer in self._layers]

    def get_time_range(self) -> Tuple[Optional[Timestamp], Optional[Timestamp]]:
        """First and last timestamps of layer 0, or ``(None, None)`` when empty."""
        if self.length() == 0:
            return None, None
        layer = self._layers[0]
        return layer[0].time, layer[-1].time

    def _check_batch(self, batch: Sequence[Sequence[DataPoint]]) -> None:
        if len(batch) != self.num_layers:
            raise LayerMismatchError(
                f"Batch has {len(batch)} layers but the store has {self.num_layers}"
            )
        validate_layer_lengths(batch, context="batch")

    @staticmethod
    def _batch_length(batch: Sequence[Sequence[DataPoint]]) -> int:
        return len(batch[0]) if len(batch) > 0 else 0

    @staticmethod
    def _check_time_order(layer: Sequence[DataPoint], layer_idx: int = 0) -> None:
        """Warn when the timestamps of a layer are not increasing."""
        times = [
            p.time.timestamp() if isinstance(p.time, datetime) else p.time
            for p in layer
            if p.time is not None
        ]
        if len(times) < 2:
            return
        try:
            diffs = np.diff(np.asarray(times, dtype=np.float64))
        except (TypeError, ValueError):
            logger.warning(f"Layer {layer_idx} has timestamps that are not numeric or datetimes")
            return
        if not np.all(diffs > 0):
            logger.warning(
                f"Timestamps of layer {layer_idx} are not strictly increasing. "
                f"Problematic diffs (first 10): {diffs[diffs <= 0][:10]}"
            )
