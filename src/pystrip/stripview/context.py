from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from loguru import logger

# Height of the strip below the plot area that carries the time labels
TIME_AXIS_HEIGHT = 20


class PlaybackMode(Enum):
    REALTIME = "realtime"
    PAGING = "paging"


@dataclass
class Margins:
    top: float = 50
    right: float = 50
    bottom: float = 50
    left: float = 50


class CycleEndedSignal:
    """
    Single-consumer channel fired once at the end of every scroll cycle.

    The view window connects its eviction callback on construction; the
    playback engine emits after the animation counter wraps.
    """

    def __init__(self):
        self._callback: Optional[Callable[[], None]] = None

    def connect(self, callback: Callable[[], None]) -> None:
        if self._callback is not None and self._callback is not callback:
            logger.debug("Replacing existing cycle-ended consumer")
        self._callback = callback

    def disconnect(self) -> None:
        self._callback = None

    @property
    def connected(self) -> bool:
        return self._callback is not None

    def emit(self) -> None:
        if self._callback is not None:
            self._callback()


@dataclass
class ChartContext:
    """
    Shared state of one chart instance.

    Centralises window configuration and host geometry so that every
    component reads the same values. Geometry is read on demand, so a host
    resize only needs to update the container size.
    """

    DEFAULT_VIEW_SIZE = 10
    DEFAULT_TIME_INTERVAL = 3
    DEFAULT_CYCLE_LENGTH = 20
    DEFAULT_MIN_VIEW_SIZE = 10
    DEFAULT_CONTAINER_WIDTH = 800.0
    DEFAULT_CONTAINER_HEIGHT = 400.0

    view_size: int = DEFAULT_VIEW_SIZE
    time_interval: int = DEFAULT_TIME_INTERVAL
    cycle_length: int = DEFAULT_CYCLE_LENGTH
    min_view_size: int = DEFAULT_MIN_VIEW_SIZE
    container_width: float = DEFAULT_CONTAINER_WIDTH
    container_height: float = DEFAULT_CONTAINER_HEIGHT
    pixel_ratio: float = 1.0
    margins: Margins = field(default_factory=Margins)
    mode: PlaybackMode = PlaybackMode.REALTIME
    cycle_ended: CycleEndedSignal = field(
        default_factory=CycleEndedSignal, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.view_size < 1:
            raise ValueError(f"view_size must be >= 1, got {self.view_size}")
        if self.time_interval < 1:
            raise ValueError(f"time_interval must be >= 1, got {self.time_interval}")
        if self.cycle_length < 1:
            raise ValueError(f"cycle_length must be >= 1, got {self.cycle_length}")
        if self.pixel_ratio <= 0:
            raise ValueError(f"pixel_ratio must be > 0, got {self.pixel_ratio}")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ChartContext":
        """
        Build a context from a script-style ``CONFIG`` dictionary.

        Parameters
        ----------
        config : Mapping[str, Any]
            Upper-case keys such as ``VIEW_SIZE``, ``TIME_INTERVAL``,
            ``CYCLE_LENGTH``, ``MIN_VIEW_SIZE``, ``WIDTH``, ``HEIGHT``,
            ``PIXEL_RATIO``, ``MARGINS`` (dict of top/right/bottom/left) and
            ``MODE`` ("realtime" or "paging"). Missing keys use the defaults.

        Returns
        -------
        ChartContext
            The configured context.
        """
        margins = config.get("MARGINS") or {}
        return cls(
            view_size=int(config.get("VIEW_SIZE", cls.DEFAULT_VIEW_SIZE)),
            time_interval=int(config.get("TIME_INTERVAL", cls.DEFAULT_TIME_INTERVAL)),
            cycle_length=int(config.get("CYCLE_LENGTH", cls.DEFAULT_CYCLE_LENGTH)),
            min_view_size=int(config.get("MIN_VIEW_SIZE", cls.DEFAULT_MIN_VIEW_SIZE)),
            container_width=float(config.get("WIDTH", cls.DEFAULT_CONTAINER_WIDTH)),
            container_height=float(config.get("HEIGHT", cls.DEFAULT_CONTAINER_HEIGHT)),
            pixel_ratio=float(config.get("PIXEL_RATIO", 1.0)),
            margins=Margins(**margins),
            mode=PlaybackMode(config.get("MODE", PlaybackMode.REALTIME.value)),
        )

    @property
    def realtime(self) -> bool:
        return self.mode is PlaybackMode.REALTIME

    @property
    def inner_width(self) -> float:
        """Width of the chart area in layout units."""
        return self.container_width - self.margins.left - self.margins.right

    @property
    def inner_height(self) -> float:
        """Height of the chart area in layout units."""
        return self.container_height - self.margins.top - self.margins.bottom

    @property
    def canvas_width(self) -> float:
        return self.inner_width * self.pixel_ratio

    @property
    def canvas_height(self) -> float:
        return (self.inner_height + TIME_AXIS_HEIGHT) * self.pixel_ratio

    @property
    def slot_width(self) -> float:
        """Render-surface distance between two consecutive points."""
        return self.inner_width * self.pixel_ratio / max(self.view_size - 1, 1)

    def resize(self, width: float, height: float) -> None:
        logger.debug(f"Container resized to {width}x{height}")
        self.container_width = float(width)
        self.container_height = float(height)
