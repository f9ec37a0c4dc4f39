from typing import Callable, List, Optional, Sequence

import numpy as np
from loguru import logger

from .context import ChartContext
from .data_store import RawSeriesStore
from .domain_tracker import DomainTracker
from .errors import LayerMismatchError
from .scales import ScaleSet
from .series import DataPoint, Domains, Layer, UpdateDirection, Widget
from .time_labels import TimeLabelTrack
from .window_positioner import WindowPositioner

DomainsChangedCallback = Callable[[ScaleSet, Domains], None]


class ViewWindow:
    """
    Materialized visible slice of the store with its derived state.

    Holds the visible points of every layer, the sparse time-label track,
    the current domains and scales. Incoming batches only ever widen the
    domains; a full rebuild happens on ``init`` (construction and zoom).
    """

    def __init__(
        self,
        widget: Widget,
        context: ChartContext,
        store: RawSeriesStore,
        positioner: WindowPositioner,
        on_domains_changed: Optional[DomainsChangedCallback] = None,
    ):
        """
        Initialise the view window and materialize the first slice.

        Parameters
        ----------
        widget : Widget
            Widget descriptor; one legend per store layer.
        context : ChartContext
            Shared chart context. The window connects its eviction to the
            context's cycle-ended signal.
        store : RawSeriesStore
            Source of historical data.
        positioner : WindowPositioner
            Holds the store index of the left edge.
        on_domains_changed : Optional[DomainsChangedCallback], default=None
            Called with the new scales and domains whenever an update widened
            the domains, so axis ticks can refresh.

        Raises
        ------
        LayerMismatchError
            If the legend count differs from the store's layer count.
        """
        if store.num_layers != len(widget.legends):
            raise LayerMismatchError(
                f"Widget has {len(widget.legends)} legends but the store has {store.num_layers} layers"
            )
        self.widget = widget
        self.context = context
        self.store = store
        self.positioner = positioner
        self.tracker = DomainTracker(widget.legends)
        self.on_domains_changed = on_domains_changed

        self.view_data: List[Layer] = []
        self.time_track = TimeLabelTrack(context.time_interval)
        self.domains = Domains()
        self.scales: Optional[ScaleSet] = None
        self.need_scale_update = False
        # Store index range [first_index, end_index) currently materialized
        self.first_index = 0
        self.end_index = 0

        self.init()
        self.context.cycle_ended.connect(self.remove)

    @property
    def time_data(self) -> List[Optional[object]]:
        return self.time_track.slots

    @property
    def capacity(self) -> int:
        return self.context.view_size + 1

    def __len__(self) -> int:
        return len(self.view_data[0]) if self.view_data else 0

    def init(self) -> None:
        """Rebuild everything from the store at the positioner's index."""
        start = self.positioner.view_start_index
        self.view_data = [
            [point.copy() for point in layer]
            for layer in self.store.slice_range(start, start + self.capacity)
        ]
        self.first_index = start
        self.end_index = start + len(self)

        self.domains = self.tracker.find_domains(self.view_data)
        self.time_track = TimeLabelTrack(self.context.time_interval)
        self.time_track.reset(self.view_data[0] if self.view_data else [])
        self.update_scales()
        self.scale_points(self.view_data)
        self.need_scale_update = False
        logger.info(
            f"View window initialised: [{self.first_index}, {self.end_index}), domains={self.domains}"
        )

    def update_scales(self) -> None:
        self.scales = ScaleSet.build(self.domains, self.context, self.widget.type)

    def scale_points(self, layers: Sequence[Sequence[DataPoint]]) -> None:
        """Set ``scaled_y`` of every numeric point through its side's scale."""
        for layer_idx, layer in enumerate(layers):
            scale = self.scales.for_side(self.widget.legends[layer_idx].side)
            values = [point.value for point in layer]
            numeric = [i for i, v in enumerate(values) if v is not None]
            if not numeric:
                continue
            scaled = np.atleast_1d(scale(np.asarray([values[i] for i in numeric])))
            for i, pixel in zip(numeric, scaled):
                layer[i].scaled_y = float(pixel)

    def append(self, batch: Sequence[Sequence[DataPoint]]) -> None:
        self.update(batch, UpdateDirection.APPEND)

    def prepend(self, batch: Sequence[Sequence[DataPoint]]) -> None:
        self.update(batch, UpdateDirection.PREPEND)

    def update(self, batch: Sequence[Sequence[DataPoint]], direction: UpdateDirection) -> None:
        """
        Merge a layered batch into the window.

        Domains are checked against the batch alone. When they widen (or a
        previous eviction asked for it) the scales are rebuilt and the whole
        window is rescaled; otherwise only the batch is scaled.
        """
        self.tracker.check_layers(batch)
        batch = [[point.copy() for point in layer] for layer in batch]
        if not batch or not batch[0]:
            return

        self.time_track.push(batch[0], direction)

        self.domains, widened = self.tracker.update_domains(
            self.domains, self.tracker.find_domains(batch)
        )
        if widened:
            self.need_scale_update = True

        if self.need_scale_update:
            self.update_scales()
            self._merge(batch, direction)
            self.scale_points(self.view_data)
            if self.on_domains_changed is not None:
                self.on_domains_changed(self.scales, self.domains)
            self.need_scale_update = False
        else:
            self.scale_points(batch)
            self._merge(batch, direction)

    def remove(self) -> None:
        """
        Evict the oldest point of every layer and the oldest time slot.

        Runs once per finished scroll cycle. Evicting a value equal to the
        current min or max of its side requests a rescale on the next update.
        """
        self.evict(1, UpdateDirection.APPEND)

    def evict(self, count: int, direction: UpdateDirection) -> None:
        """
        Drop ``count`` points from the edge opposite ``direction``.

        After an append the oldest points go, after a prepend the newest.
        """
        count = min(count, len(self))
        if count <= 0:
            return
        for layer_idx, layer in enumerate(self.view_data):
            if direction is UpdateDirection.APPEND:
                removed, self.view_data[layer_idx] = layer[:count], layer[count:]
            else:
                removed, self.view_data[layer_idx] = layer[-count:], layer[:-count]
            self._check_evicted(layer_idx, removed)

        if direction is UpdateDirection.APPEND:
            self.time_track.drop_oldest(count)
            self.first_index += count
        else:
            self.time_track.drop_newest(count)
            self.end_index -= count

    def shift_indices(self, offset: int) -> None:
        """Follow points inserted in front of the store."""
        self.first_index += offset
        self.end_index += offset

    def _check_evicted(self, layer_idx: int, removed: Sequence[DataPoint]) -> None:
        domain = self.domains.for_side(self.widget.legends[layer_idx].side)
        for point in removed:
            value = point.value
            if value is not None and (value == domain.max or value == domain.min):
                self.need_scale_update = True

    def _merge(self, batch: List[Layer], direction: UpdateDirection) -> None:
        size = len(batch[0])
        if direction is UpdateDirection.APPEND:
            for layer, points in zip(self.view_data, batch):
                layer.extend(points)
            self.end_index += size
        else:
            for layer_idx, points in enumerate(batch):
                self.view_data[layer_idx] = points + self.view_data[layer_idx]
            self.first_index -= size
