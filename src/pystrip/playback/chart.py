import sys
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Union

from loguru import logger

from pystrip.stripview.context import ChartContext
from pystrip.stripview.data_store import RawSeriesStore
from pystrip.stripview.errors import LayerMismatchError
from pystrip.stripview.scales import ScaleSet
from pystrip.stripview.series import (
    DataPoint,
    Domains,
    Layer,
    UpdateDirection,
    Widget,
    layers_from_records,
)
from pystrip.stripview.view_window import ViewWindow
from pystrip.stripview.window_positioner import RevealRange, WindowPositioner

from .animation import AnimationCycle
from .queue import PlaybackQueue

LayeredInput = Sequence[Sequence[Union[DataPoint, Mapping[str, Any], None]]]


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure loguru logging with specified level.

    Parameters
    ----------
    log_level : str, default="INFO"
        Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs to compose one frame."""

    view_data: List[Layer]
    time_data: List[Optional[Any]]
    scales: ScaleSet
    offset: float = 0.0


class Renderer(Protocol):
    def draw(self, frame: Frame) -> None: ...

    def update_axes(self, scales: ScaleSet, domains: Domains) -> None: ...


class StripChart:
    """
    Tick-driven scrolling chart over a growing multi-layer dataset.

    Composes the store, the window positioner and the view window, buffers
    pushed batches, and runs the scroll cycle on externally delivered ticks.
    Drawing and axis rendering are delegated to an optional renderer.
    """

    def __init__(
        self,
        widget: Widget,
        initial_data: Optional[LayeredInput] = None,
        context: Optional[ChartContext] = None,
        renderer: Optional[Renderer] = None,
    ):
        """
        Initialise the chart.

        Parameters
        ----------
        widget : Widget
            Widget descriptor with one legend per layer.
        initial_data : Optional[LayeredInput], default=None
            Initial points per layer, as DataPoint or ``{"time", "y", ...}``
            dicts. None starts every layer empty.
        context : Optional[ChartContext], default=None
            Shared chart configuration and geometry. Defaults are used if None.
        renderer : Optional[Renderer], default=None
            Receives frames and axis updates.

        Raises
        ------
        LayerMismatchError
            If the number of layers differs from the number of legends.
        """
        self.widget = widget
        self.context = context or ChartContext()
        self.renderer = renderer

        layers = (
            layers_from_records(initial_data)
            if initial_data is not None
            else [[] for _ in widget.legends]
        )
        if len(layers) != len(widget.legends):
            raise LayerMismatchError(
                f"Got {len(layers)} layers for {len(widget.legends)} legends"
            )

        self.store = RawSeriesStore(layers)
        self.positioner = WindowPositioner(len(self.store), self.context.view_size)
        self.view_window = ViewWindow(
            widget,
            self.context,
            self.store,
            self.positioner,
            on_domains_changed=self.update_axes,
        )
        self.queue = PlaybackQueue(self.store.num_layers)
        self.animation = AnimationCycle(self.context.cycle_length)
        logger.info(
            f"Chart ready: {self.store.num_layers} layers, {len(self.store)} points, "
            f"view_size={self.context.view_size}, mode={self.context.mode.value}"
        )

    @property
    def view_data(self) -> List[Layer]:
        return self.view_window.view_data

    @property
    def time_data(self) -> List[Optional[Any]]:
        return self.view_window.time_data

    @property
    def scales(self) -> ScaleSet:
        return self.view_window.scales

    @property
    def domains(self) -> Domains:
        return self.view_window.domains

    def push_data(self, batch: LayeredInput) -> None:
        """
        Hand a new layered batch to the chart.

        In realtime mode the batch waits in the playback queue until an idle
        tick applies it. In paging mode it goes straight into the store and
        becomes visible when the window is paged over it.
        """
        layers = layers_from_records(batch)
        if not self.context.realtime:
            self.store.append(layers)
            return
        self.queue.push(layers)

    def backfill(self, batch: LayeredInput) -> None:
        """Insert older history in front of the store without moving the view."""
        layers = layers_from_records(batch)
        self.store.prepend(layers)
        size = len(layers[0]) if layers else 0
        self.positioner.shift(size)
        self.view_window.shift_indices(size)

    def handle_tick(self) -> None:
        """
        Advance the chart by one external tick.

        An active scroll cycle advances its counter and redraws; the tick that
        completes the cycle fires the cycle-ended signal instead. Once idle,
        the next queued batch is applied and a new cycle starts.
        """
        if self.animation.active:
            if self.animation.advance():
                self.context.cycle_ended.emit()
                self.positioner.move_forward(1, self.context.view_size, len(self.store))
            else:
                self.draw()

        if not self.animation.active:
            batch = self.queue.pop()
            if batch is not None:
                self.store.append(batch)
                self.view_window.append(batch)
                self.animation.start()
                self.draw()

    def zoom(self, delta: int) -> bool:
        """
        Grow (positive ``delta``) or shrink (negative) the window size.

        Bypasses the queue and the scroll cycle: the window is repositioned
        and fully rebuilt. A cycle already in flight still runs to completion.

        Returns
        -------
        bool
            False if a shrink was rejected by the minimum view size.
        """
        new_size = self.context.view_size + delta
        if delta < 0 and (new_size <= self.context.min_view_size or new_size < 1):
            logger.warning(
                f"Zoom rejected: view size {new_size} must stay above {self.context.min_view_size}"
            )
            return False
        if delta == 0:
            return True

        self.context.view_size = new_size
        self.positioner.recompute(len(self.store), new_size)
        self.view_window.init()
        logger.info(f"Zoomed to view size {new_size}")
        self.update_axes(self.view_window.scales, self.view_window.domains)
        self.draw()
        return True

    def zoom_in(self, amount: int) -> bool:
        return self.zoom(-amount)

    def zoom_out(self, amount: int) -> bool:
        return self.zoom(amount)

    def page_forward(self, num_moves: int) -> Optional[RevealRange]:
        """
        Page the window towards newer data (paging mode only).

        Returns
        -------
        Optional[RevealRange]
            The range reported by the positioner, or None if paging is not
            possible right now.
        """
        if not self._can_page():
            return None
        window = self.view_window
        total = len(self.store)
        reveal = self.positioner.move_forward(num_moves, self.context.view_size, total)
        start = self.positioner.view_start_index
        end = min(start + window.capacity, total)

        if start >= window.end_index:
            window.init()
        else:
            if end > window.end_index:
                window.append(self.store.slice_range(window.end_index, end))
            if start > window.first_index:
                window.evict(start - window.first_index, UpdateDirection.APPEND)
        self.draw()
        return reveal

    def page_back(self, num_moves: int) -> Optional[RevealRange]:
        """Page the window towards older data (paging mode only)."""
        if not self._can_page():
            return None
        window = self.view_window
        reveal = self.positioner.move_back(num_moves)
        if len(reveal) == 0:
            return reveal

        if reveal.start + window.capacity <= window.first_index:
            window.init()
        else:
            window.prepend(self.store.slice_range(reveal.start, window.first_index))
            excess = len(window) - window.capacity
            if excess > 0:
                window.evict(excess, UpdateDirection.PREPEND)
        self.draw()
        return reveal

    def resize(self, width: float, height: float) -> None:
        """Apply a new container size and rescale the visible points."""
        self.context.resize(width, height)
        self.view_window.update_scales()
        self.view_window.scale_points(self.view_window.view_data)
        self.update_axes(self.view_window.scales, self.view_window.domains)
        self.draw()

    def update_axes(self, scales: ScaleSet, domains: Domains) -> None:
        if self.renderer is not None:
            self.renderer.update_axes(scales, domains)

    def current_frame(self) -> Frame:
        offset = self.animation.offset(self.context.slot_width) if self.animation.active else 0.0
        return Frame(
            view_data=self.view_window.view_data,
            time_data=self.view_window.time_data,
            scales=self.view_window.scales,
            offset=offset,
        )

    def draw(self) -> None:
        if self.renderer is not None:
            self.renderer.draw(self.current_frame())

    def _can_page(self) -> bool:
        if self.context.realtime:
            logger.warning("Paging is only available in paging mode")
            return False
        if self.animation.active:
            logger.warning("Paging rejected while a scroll cycle is running")
            return False
        return True
