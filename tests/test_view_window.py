import pytest

from conftest import SAMPLE_RECORDS, make_legend, make_window, series_records
from pystrip.stripview import (
    ChartContext,
    DataPoint,
    Domain,
    Domains,
    LayerMismatchError,
    PlaybackMode,
    RawSeriesStore,
    UpdateDirection,
    ViewWindow,
    Widget,
    WindowPositioner,
    layers_from_records,
)


def batch_of(*values):
    return [[DataPoint(y=v)] for v in values]


class TestInit:
    """Materializing the first window"""

    def test_short_history_is_fully_visible(self):
        widget = Widget(legends=[make_legend(1)])
        window = make_window([series_records([0, 1, 2, 3])], widget, ChartContext(view_size=10))
        assert window.positioner.view_start_index == 0
        assert [p.y for p in window.view_data[0]] == [0, 1, 2, 3]
        assert (window.first_index, window.end_index) == (0, 4)

    def test_long_history_shows_last_points(self):
        widget = Widget(legends=[make_legend(1)])
        window = make_window([series_records(list(range(30)))], widget, ChartContext(view_size=10))
        assert [p.y for p in window.view_data[0]] == list(range(19, 30))
        assert len(window.time_data) == 11

    def test_initial_domains(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        assert window.domains == Domains(left=Domain(-2, 6), right=Domain(0, 0))

    def test_initial_scaled_values(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        assert window.view_data[4][2].scaled_y == pytest.approx(0.0)
        assert window.view_data[3][3].scaled_y == pytest.approx(200.0)
        assert window.view_data[0][0].scaled_y == pytest.approx(150.0)
        assert window.view_data[3][0].scaled_y is None

    def test_store_points_are_not_modified(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        assert window.store.layers[0][0].scaled_y is None

    def test_legend_count_mismatch_raises(self, five_left_widget):
        store = RawSeriesStore(layers_from_records(SAMPLE_RECORDS[:2]))
        with pytest.raises(LayerMismatchError):
            ViewWindow(five_left_widget, ChartContext(), store, WindowPositioner(len(store), 10))


class TestUpdate:
    """Incremental append/prepend protocol"""

    def test_domain_widens_after_update(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        window.append(batch_of(6, 4, 4, -5, 7))
        assert window.domains == Domains(left=Domain(-5, 7), right=Domain(0, 0))

    def test_widening_rescales_whole_window(self, five_left_widget, small_context):
        calls = []
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        window.on_domains_changed = lambda scales, domains: calls.append(domains)
        window.append(batch_of(6, 4, 4, -5, 7))

        assert calls == [Domains(left=Domain(-5, 7))]
        assert not window.need_scale_update
        # y=0 on (-5, 7) mapped onto (200, 0)
        assert window.view_data[0][0].scaled_y == pytest.approx(200 - 200 * 5 / 12)
        assert window.view_data[4][-1].scaled_y == pytest.approx(0.0)
        assert window.view_data[3][-1].scaled_y == pytest.approx(200.0)

    def test_no_widening_scales_only_batch(self, five_left_widget, small_context):
        calls = []
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        window.on_domains_changed = lambda scales, domains: calls.append(domains)
        window.append(batch_of(2, 2, 2, None, 2))

        assert calls == []
        assert len(window) == 5
        assert window.view_data[0][-1].scaled_y == pytest.approx(100.0)
        assert window.view_data[3][-1].scaled_y is None

    def test_batch_with_wrong_layer_count_raises(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        with pytest.raises(LayerMismatchError):
            window.append(batch_of(1, 2))

    def test_prepend_adds_on_the_left(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        window.first_index = 5
        window.prepend(batch_of(-10, 0, 0, 0, 0))
        assert [p.y for p in window.view_data[0]] == [-10, 0, 1, 2, 3]
        assert window.domains.left == Domain(-10, 6)
        assert window.first_index == 4
        assert len(window.time_data) == 5

    def test_domains_never_shrink(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        previous = window.domains
        for values in [(1, 1, 1, 1, 1), (10, 0, 0, 0, 0), (0, -3, 0, 0, 0), (2, 2, 2, 2, 2)]:
            window.append(batch_of(*values))
            window.remove()
            assert window.domains.left.min <= previous.left.min
            assert window.domains.left.max >= previous.left.max
            previous = window.domains
        assert window.domains.left == Domain(-3, 10)


class TestRemove:
    """Eviction at the end of a scroll cycle"""

    def test_remove_evicts_oldest_point_and_slot(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        window.remove()
        assert [p.y for p in window.view_data[0]] == [1, 2, 3]
        assert len(window.time_data) == 3
        assert window.first_index == 1

    def test_cycle_ended_signal_runs_remove(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        small_context.cycle_ended.emit()
        assert len(window) == 3

    def test_evicting_an_extremum_requests_rescale(self, five_left_widget, small_context):
        window = make_window(SAMPLE_RECORDS, five_left_widget, small_context)
        window.remove()
        window.remove()
        assert not window.need_scale_update
        # Third column holds 6, the current max
        window.remove()
        assert window.need_scale_update

        calls = []
        window.on_domains_changed = lambda scales, domains: calls.append(domains)
        window.append(batch_of(0, 0, 0, 0, 0))
        assert calls == [Domains(left=Domain(-2, 6))]
        assert not window.need_scale_update

    def test_remove_on_empty_window(self):
        widget = Widget(legends=[make_legend(1)])
        window = make_window([[]], widget, ChartContext())
        window.remove()
        assert len(window) == 0


class TestEvict:
    def test_evict_newest_after_prepend(self):
        widget = Widget(legends=[make_legend(1)])
        context = ChartContext(view_size=10, mode=PlaybackMode.PAGING)
        window = make_window([series_records(list(range(30)))], widget, context)
        window.evict(3, UpdateDirection.PREPEND)
        assert [p.y for p in window.view_data[0]] == list(range(19, 27))
        assert window.end_index == 27
        assert len(window.time_data) == 8
