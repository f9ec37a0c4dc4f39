"""
Data-shaping core of PyStrip.

This package keeps a bounded view window over a growing multi-layer
time-series store, together with its value domains, pixel scales and
sparse time-label track.
"""

from pystrip.stripview.context import ChartContext, CycleEndedSignal, Margins, PlaybackMode
from pystrip.stripview.data_store import RawSeriesStore
from pystrip.stripview.domain_tracker import DomainTracker, find_domains, update_domains
from pystrip.stripview.errors import LayerMismatchError
from pystrip.stripview.scales import LinearScale, ScaleSet
from pystrip.stripview.series import (
    AxisSide,
    ChartType,
    DataPoint,
    Domain,
    Domains,
    Legend,
    LegendParameters,
    UpdateDirection,
    Widget,
    WidgetType,
    layers_from_records,
)
from pystrip.stripview.time_labels import TimeLabelTrack, format_time_label
from pystrip.stripview.view_window import ViewWindow
from pystrip.stripview.window_positioner import RevealRange, WindowPositioner

__all__ = [
    "AxisSide",
    "ChartContext",
    "ChartType",
    "CycleEndedSignal",
    "DataPoint",
    "Domain",
    "DomainTracker",
    "Domains",
    "LayerMismatchError",
    "Legend",
    "LegendParameters",
    "LinearScale",
    "Margins",
    "PlaybackMode",
    "RawSeriesStore",
    "RevealRange",
    "ScaleSet",
    "TimeLabelTrack",
    "UpdateDirection",
    "ViewWindow",
    "Widget",
    "WidgetType",
    "WindowPositioner",
    "find_domains",
    "format_time_label",
    "layers_from_records",
    "update_domains",
]
