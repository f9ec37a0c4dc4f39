from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Optional, Sequence

import matplotlib.dates as mdates

from .series import DataPoint, Timestamp, UpdateDirection

DEFAULT_LABEL_FORMAT = "%H:%M:%S"


def format_time_label(
    timestamp: Optional[Timestamp], fmt: str = DEFAULT_LABEL_FORMAT
) -> Optional[str]:
    """
    Format a slot timestamp for display.

    Parameters
    ----------
    timestamp : Optional[Timestamp]
        A datetime, or epoch seconds (interpreted as UTC). None stays None.
    fmt : str, default="%H:%M:%S"
        strftime-style format passed to matplotlib's DateFormatter.

    Returns
    -------
    Optional[str]
        The label text, or None for an empty slot.
    """
    if timestamp is None:
        return None
    if isinstance(timestamp, datetime):
        moment = timestamp if timestamp.tzinfo else timestamp.replace(tzinfo=timezone.utc)
    else:
        moment = datetime.fromtimestamp(float(timestamp), tz=timezone.utc)
    formatter = mdates.DateFormatter(fmt, tz=moment.tzinfo)
    return formatter(mdates.date2num(moment))


class TimeLabelTrack:
    """
    Sparse time-label track running parallel to the visible window.

    Only every ``stride``-th slot carries a timestamp, the rest hold None.
    The track shifts in both directions, so instead of a modulo counter the
    next slot is decided by the run of empty slots at the insertion edge: a
    run of ``stride - 1`` empties means the new slot gets a label.
    """

    def __init__(self, stride: int):
        if stride < 1:
            raise ValueError(f"stride must be >= 1, got {stride}")
        self.stride = stride
        self._slots: Deque[Optional[Timestamp]] = deque()

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def slots(self) -> List[Optional[Timestamp]]:
        return list(self._slots)

    def reset(self, points: Sequence[DataPoint]) -> None:
        self._slots.clear()
        self.push(points, UpdateDirection.APPEND)

    def push(self, points: Sequence[DataPoint], direction: UpdateDirection) -> None:
        """Add one slot per point at the edge given by ``direction``."""
        if direction is UpdateDirection.APPEND:
            for point in points:
                self._slots.append(self._label_for(point, direction))
        else:
            for point in reversed(points):
                self._slots.appendleft(self._label_for(point, direction))

    def drop_oldest(self, count: int = 1) -> None:
        for _ in range(min(count, len(self._slots))):
            self._slots.popleft()

    def drop_newest(self, count: int = 1) -> None:
        for _ in range(min(count, len(self._slots))):
            self._slots.pop()

    def empty_run(self, direction: UpdateDirection) -> int:
        """Number of consecutive empty slots at the insertion edge."""
        slots = reversed(self._slots) if direction is UpdateDirection.APPEND else iter(self._slots)
        run = 0
        for slot in slots:
            if slot is not None:
                break
            run += 1
        return run

    def formatted(self, fmt: str = DEFAULT_LABEL_FORMAT) -> List[Optional[str]]:
        return [format_time_label(slot, fmt) for slot in self._slots]

    def _label_for(self, point: DataPoint, direction: UpdateDirection) -> Optional[Timestamp]:
        # Modulo keeps the stride going across points that carry no timestamp
        if self.empty_run(direction) % self.stride == self.stride - 1:
            return point.time
        return None
