import pytest

from pystrip.stripview import (
    AxisSide,
    ChartContext,
    ChartType,
    Legend,
    LegendParameters,
    Margins,
    RawSeriesStore,
    ViewWindow,
    Widget,
    WindowPositioner,
    layers_from_records,
)

SAMPLE_RECORDS = [
    [{"y": 0}, {"y": 1}, {"y": 2}, {"y": 3}],
    [{"y": 3}, {"y": 2}, {"y": 1}, {"y": -1}],
    [{"y": 4}, {"y": 4}, {"y": 3}, {"y": 1}],
    [{"y": None}, {"y": 2}, {"y": None}, {"y": -2}],
    [{"y": 1}, {"y": 3}, {"y": 6}, {"y": 5}],
]


def make_legend(idx, chart_type=ChartType.LINE, side=AxisSide.LEFT, active=True):
    return Legend(
        id=idx,
        parameters=LegendParameters(is_active=active, y_axis_side=side, chart_type=chart_type),
    )


def series_records(values, start_time=0):
    return [{"time": start_time + i, "y": v} for i, v in enumerate(values)]


def make_window(records, widget, context):
    store = RawSeriesStore(layers_from_records(records))
    positioner = WindowPositioner(len(store), context.view_size)
    return ViewWindow(widget, context, store, positioner)


@pytest.fixture
def five_left_widget():
    """Five active left-axis line legends."""
    return Widget(legends=[make_legend(i + 1) for i in range(5)])


@pytest.fixture
def sample_layers():
    return layers_from_records(SAMPLE_RECORDS)


@pytest.fixture
def small_context():
    """100x100 chart area with a pixel ratio of 2."""
    return ChartContext(
        view_size=10,
        container_width=200,
        container_height=200,
        pixel_ratio=2.0,
        margins=Margins(50, 50, 50, 50),
    )
