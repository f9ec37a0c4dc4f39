"""
PyStrip: scrolling strip-chart engine for streaming time series

Keeps domains, scales and scaled points of a moving view window consistent
as data streams in, is paged, or is zoomed.
"""

# Import from stripview subpackage
from pystrip.stripview.context import ChartContext, PlaybackMode
from pystrip.stripview.data_store import RawSeriesStore
from pystrip.stripview.domain_tracker import DomainTracker
from pystrip.stripview.errors import LayerMismatchError
from pystrip.stripview.scales import ScaleSet
from pystrip.stripview.series import ChartType, DataPoint, Legend, Widget, WidgetType
from pystrip.stripview.view_window import ViewWindow
from pystrip.stripview.window_positioner import WindowPositioner

# Import from playback subpackage
from pystrip.playback.chart import StripChart, configure_logging
from pystrip.playback.queue import PlaybackQueue

__all__ = [
    # Core window components
    "ChartContext",
    "ChartType",
    "DataPoint",
    "DomainTracker",
    "LayerMismatchError",
    "Legend",
    "PlaybackMode",
    "RawSeriesStore",
    "ScaleSet",
    "ViewWindow",
    "Widget",
    "WidgetType",
    "WindowPositioner",
    # Playback components
    "PlaybackQueue",
    "StripChart",
    "configure_logging",
]
