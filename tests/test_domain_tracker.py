import numpy as np
import pytest

from conftest import make_legend
from pystrip.stripview import (
    AxisSide,
    ChartType,
    DataPoint,
    Domain,
    Domains,
    DomainTracker,
    find_domains,
    layers_from_records,
    update_domains,
)

MIXED_RECORDS = [
    [{"y": 3}, {"y": 2}, {"y": -5}, None],
    [{"y": -1}, {"y": None}, {"y": 10}, {"y": -30}],
    [None, None, {"y": -31}],
]


def records(*rows):
    return layers_from_records([[{"y": v} if not isinstance(v, dict) else v for v in row] for row in rows])


class TestFindMinAndMax:
    """Per-side min/max folding"""

    def test_no_data_gives_zero_domain(self, five_left_widget):
        tracker = DomainTracker(five_left_widget.legends)
        assert tracker.find_min_and_max([[], [], []], [0, 1, 2]) == Domain(0, 0)

    def test_no_layer_indices_gives_zero_domain(self, five_left_widget):
        tracker = DomainTracker(five_left_widget.legends)
        assert tracker.find_min_and_max(layers_from_records(MIXED_RECORDS), []) == Domain(0, 0)

    def test_all_legends(self, five_left_widget):
        tracker = DomainTracker(five_left_widget.legends)
        assert tracker.find_min_and_max(layers_from_records(MIXED_RECORDS), [0, 1, 2]) == Domain(-31, 10)

    def test_part_of_legends(self, five_left_widget):
        tracker = DomainTracker(five_left_widget.legends)
        assert tracker.find_min_and_max(layers_from_records(MIXED_RECORDS), [0, 1]) == Domain(-30, 10)

    def test_inactive_legends_are_skipped(self, five_left_widget):
        five_left_widget.legends[1].parameters.is_active = False
        five_left_widget.legends[2].parameters.is_active = False
        tracker = DomainTracker(five_left_widget.legends)
        assert tracker.find_min_and_max(layers_from_records(MIXED_RECORDS), [0, 1, 2]) == Domain(-5, 3)

    def test_all_inactive_gives_zero_domain(self):
        legends = [make_legend(i, active=False) for i in range(2)]
        result = DomainTracker(legends).find_min_and_max(records([100, -100], [5, 6]), [0, 1])
        assert result == Domain(0, 0)

    def test_all_negative_line_keeps_negative_max(self):
        legends = [make_legend(0)]
        assert DomainTracker(legends).find_min_and_max(records([-3, -1, -2]), [0]) == Domain(-3, -1)

    def test_stacked_bar_bounds_stacked_totals(self):
        legends = [make_legend(i, ChartType.STACKED_BAR) for i in range(3)]
        layers = records([3, 2, -5, 3.54], [-1, 1.54, 10, -2.4], [1.4, 2.22, -3.1, 2])
        result = DomainTracker(legends).find_min_and_max(layers, [0, 1, 2])
        assert result.min == pytest.approx(-8.1)
        assert result.max == pytest.approx(10)

    def test_stacked_bar_single_index(self):
        legends = [make_legend(i, ChartType.STACKED_BAR) for i in range(4)]
        layers = records([4], [-2], [5], [-7])
        result = DomainTracker(legends).find_min_and_max(layers, [0, 1, 2, 3])
        assert result == Domain(-9, 9)

    def test_bubble_tail_points_count(self):
        legends = [make_legend(0, ChartType.BUBBLE), make_legend(1), make_legend(2)]
        layers = records(
            [{"y": 3, "tailPoint": 3.4}, {"y": 2, "tailPoint": 1.3}, {"y": -5, "tailPoint": -5.3}, {"y": 3.54, "tailPoint": 4}],
            [-1, 1.54, 10, -2.4],
            [1.4, 2.22, -3.1, 2],
        )
        result = DomainTracker(legends).find_min_and_max(layers, [0, 1, 2])
        assert result.min == pytest.approx(-5.3)
        assert result.max == pytest.approx(10)

    def test_tail_point_ignored_for_line(self):
        legends = [make_legend(0)]
        layers = records([{"y": 1, "tailPoint": 50}])
        assert DomainTracker(legends).find_min_and_max(layers, [0]) == Domain(1, 1)

    def test_all_chart_types(self):
        legends = [
            make_legend(0, ChartType.BUBBLE),
            make_legend(1, ChartType.STACKED_BAR),
            make_legend(2, ChartType.LINE),
            make_legend(3, ChartType.STACKED_BAR),
            make_legend(4, ChartType.LINE),
        ]
        layers = records(
            [{"y": 3, "tailPoint": 3.4}, {"y": 2, "tailPoint": 1.3}, {"y": -5, "tailPoint": -5.3}, {"y": 3.54, "tailPoint": 4}],
            [-1, 1.54, 10, -2.4],
            [1.4, 2.22, -3.1, 2],
            [2.3, 3.40, 0.50, 4],
            [4.44, 0.225, 4.89, 0],
        )
        result = DomainTracker(legends).find_min_and_max(layers, [0, 1, 2, 3, 4])
        assert result.min == pytest.approx(-5.3)
        assert result.max == pytest.approx(10.5)

    def test_non_stacked_bar_uses_plain_min_max(self):
        legends = [make_legend(i, ChartType.NON_STACKED_BAR) for i in range(2)]
        result = DomainTracker(legends).find_min_and_max(records([4], [5]), [0, 1])
        assert result == Domain(4, 5)


class TestFindDomains:
    def test_sides_are_separate(self, sample_layers):
        legends = [make_legend(i) for i in range(4)] + [make_legend(4, side=AxisSide.RIGHT)]
        domains = find_domains(sample_layers, legends)
        assert domains.left == Domain(-2, 4)
        assert domains.right == Domain(1, 6)

    def test_initial_sample_domain(self, five_left_widget, sample_layers):
        domains = find_domains(sample_layers, five_left_widget.legends)
        assert domains == Domains(left=Domain(-2, 6), right=Domain(0, 0))

    def test_numpy_scalars_and_numeric_strings(self):
        layers = [
            [DataPoint(y=np.float32(1)), DataPoint(y=np.int64(9)), DataPoint(y="5")],
            [DataPoint(y=np.float64(-3)), DataPoint(y="1_000"), DataPoint(y=np.int32(4))],
        ]
        legends = [make_legend(1), make_legend(2, side=AxisSide.RIGHT)]
        domains = find_domains(layers, legends)
        assert domains.left == Domain(1, 9)
        assert domains.right == Domain(-3, 4)


class TestUpdateDomains:
    def test_widening(self):
        existing = Domains(left=Domain(-2, 6))
        combined, widened = update_domains(existing, Domains(left=Domain(-5, 7)))
        assert widened
        assert combined == Domains(left=Domain(-5, 7), right=Domain(0, 0))

    def test_never_narrows(self):
        existing = Domains(left=Domain(-2, 6), right=Domain(1, 2))
        combined, widened = update_domains(existing, Domains(left=Domain(0, 1), right=Domain(1, 2)))
        assert not widened
        assert combined is existing

    def test_partial_widening(self):
        existing = Domains(left=Domain(-2, 6), right=Domain(-1, 1))
        combined, widened = update_domains(existing, Domains(left=Domain(0, 1), right=Domain(-1, 3)))
        assert widened
        assert combined == Domains(left=Domain(-2, 6), right=Domain(-1, 3))
