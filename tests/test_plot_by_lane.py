"""Tests for the candle-stick by lane plot."""

from collections import Counter

import pytest

from multiqc_savplot.constants import MetricType
from multiqc_savplot.exceptions import IndexOutOfBoundsError, InvalidFilterOption, InvalidMetricTypeError
from multiqc_savplot.filter_options import FilterOptions
from multiqc_savplot.metric_value import TileMetricValue
from multiqc_savplot.model import MetricSet, RunInfo, RunMetrics, TileMetric
from multiqc_savplot.plot_by_lane import plot_by_lane, populate_candle_stick_by_lane
from multiqc_savplot.plot_data import PlotData


def plot(run_metrics: RunMetrics, metric_type, options=None) -> PlotData:
    data = PlotData()
    plot_by_lane(run_metrics, metric_type, options or FilterOptions(), data)
    return data


class TestPopulateCandleStickByLane:
    def test_one_point_per_lane(self, tile_metrics: MetricSet):
        points: list = []
        populate_candle_stick_by_lane(tile_metrics, TileMetricValue(), FilterOptions(), MetricType.Density, points)
        assert [p.x for p in points] == [1.0, 2.0]
        assert [p.p50 for p in points] == [110.0, 210.0]

    def test_missing_lanes_are_skipped(self):
        metrics = MetricSet(
            [
                TileMetric(lane=1, tile=1101, cluster_density=1.0),
                TileMetric(lane=3, tile=1101, cluster_density=3.0),
                TileMetric(lane=4, tile=1101),
            ]
        )
        points: list = []
        populate_candle_stick_by_lane(metrics, TileMetricValue(), FilterOptions(), MetricType.Density, points)
        # lane 2 has no records, lane 4 only NaN
        assert [p.x for p in points] == [1.0, 3.0]

    def test_filter_is_applied(self, tile_metrics: MetricSet):
        points: list = []
        options = FilterOptions(surface=1)
        populate_candle_stick_by_lane(tile_metrics, TileMetricValue(), options, MetricType.Density, points)
        assert points[0].lower == 100.0
        assert points[0].upper == 110.0

    def test_buckets_partition_values(self, tile_metrics: MetricSet):
        collected: list[float] = []

        def proxy(metric, metric_type):
            value = TileMetricValue()(metric, metric_type)
            if value is not None:
                collected.append(value)
            return value

        points: list = []
        populate_candle_stick_by_lane(tile_metrics, proxy, FilterOptions(), MetricType.Density, points)
        expected = Counter(m.cluster_density for m in tile_metrics)
        assert Counter(collected) == expected
        assert len(points) == len({m.lane for m in tile_metrics})

    def test_custom_proxy_nan_is_skipped(self, tile_metrics: MetricSet):
        points: list = []
        populate_candle_stick_by_lane(
            tile_metrics, lambda m, t: float("nan") if m.lane == 1 else 1.0, FilterOptions(), MetricType.Density, points
        )
        assert [p.x for p in points] == [2.0]

    def test_empty_set(self):
        points: list = ["stale"]
        populate_candle_stick_by_lane(MetricSet(), TileMetricValue(), FilterOptions(), MetricType.Density, points)
        assert points == []

    def test_lane_zero_rejected(self):
        metrics = MetricSet([TileMetric(lane=0, tile=1101, cluster_density=1.0), TileMetric(lane=1, tile=1101)])
        with pytest.raises(IndexOutOfBoundsError):
            populate_candle_stick_by_lane(metrics, TileMetricValue(), FilterOptions(), MetricType.Density, [])


class TestPlotByLane:
    def test_density(self, run_metrics: RunMetrics):
        data = plot(run_metrics, MetricType.Density)

        assert len(data) == 2
        assert (data[0].title, data[0].color) == ("Density", "Blue")
        assert (data[1].title, data[1].color) == ("PF", "DarkGreen")
        assert [p.p50 for p in data[0]] == [110.0, 210.0]
        assert [p.p50 for p in data[1]] == [100.0, 200.0]
        assert all(p.outliers == () for p in data[0])

        assert (data.x_axis.min, data.x_axis.max) == (0.0, 3.0)
        # PF series extends the data down to 90
        assert data.y_axis.min == pytest.approx(155.0 - 65.0 * 1.2)
        assert data.y_axis.max == pytest.approx(155.0 + 65.0 * 1.2)
        assert data.x_axis.label == "Lane"
        assert data.y_axis.label == "Density"
        assert data.title == "FC123"

    def test_metric_without_pf_series(self, run_metrics: RunMetrics):
        data = plot(run_metrics, MetricType.PercentPF)
        assert len(data) == 1
        assert data[0].title == "% PF"
        # y-span is 20% wider than the data span
        values = [p for p in data[0]]
        span = max(p.max_value for p in values) - min(p.min_value for p in values)
        assert data.y_axis.max - data.y_axis.min == pytest.approx(1.2 * span)

    def test_cluster_count_adds_pf_series(self, run_metrics: RunMetrics):
        data = plot(run_metrics, "ClusterCount")
        assert [s.title for s in data] == ["Cluster Count", "PF"]
        assert [p.p50 for p in data[1]] == [1000.0, 1900.0]

    @pytest.mark.parametrize("metric_type", [MetricType.PercentPhasing, MetricType.PercentPrephasing])
    def test_phasing_clamped_to_unit_range(self, run_metrics: RunMetrics, metric_type):
        data = plot(run_metrics, metric_type, FilterOptions(read=1))
        assert len(data[0]) == 2
        assert (data.y_axis.min, data.y_axis.max) == (0.0, 1.0)

    def test_title_with_read_and_surface(self, run_metrics: RunMetrics):
        data = plot(run_metrics, MetricType.PercentPhasing, FilterOptions(read=1, surface=1))
        assert data.title == "FC123 Read 1 Top"

    def test_read_not_in_title_for_tile_metric(self, run_metrics: RunMetrics):
        data = plot(run_metrics, MetricType.Density, FilterOptions(read=1))
        assert data.title == "FC123"

    def test_surface_omitted_for_single_surface_flowcell(self, tile_metrics: MetricSet):
        metrics = RunMetrics(run_info=RunInfo(), tile_metric_set=tile_metrics)
        data = plot(metrics, MetricType.PercentAligned, FilterOptions(read=1, surface=1))
        assert data.title == "Read 1"

    def test_single_value_lane(self, run_info: RunInfo):
        metrics = RunMetrics(run_info=run_info, tile_metric_set=MetricSet([TileMetric(1, 1101, cluster_density=42.0)]))
        data = plot(metrics, MetricType.Density)
        point = data[0][0]
        assert (point.lower, point.p25, point.p50, point.p75, point.upper) == (42.0, 42.0, 42.0, 42.0, 42.0)
        assert point.outliers == ()

    def test_empty_set(self, run_info: RunInfo):
        data = plot(RunMetrics(run_info=run_info), MetricType.PercentAligned)
        assert len(data) == 1
        assert len(data[0]) == 0
        assert (data.x_axis.min, data.x_axis.max) == (0.0, 1.0)

    def test_all_values_filtered(self, run_metrics: RunMetrics):
        data = plot(run_metrics, MetricType.PercentPhasing)
        assert len(data[0]) == 0
        assert (data.y_axis.min, data.y_axis.max) == (0.0, 1.0)

    def test_unknown_metric_name(self, run_metrics: RunMetrics):
        with pytest.raises(InvalidMetricTypeError):
            plot(run_metrics, "NotAMetric")

    def test_invalid_filter(self, run_metrics: RunMetrics):
        with pytest.raises(InvalidFilterOption):
            plot(run_metrics, MetricType.Density, FilterOptions(lane=5))

    def test_repeatable(self, run_metrics: RunMetrics):
        first = plot(run_metrics, MetricType.Density)
        second = plot(run_metrics, MetricType.Density)
        assert [s.points for s in first] == [s.points for s in second]
        assert (first.y_axis, first.title) == (second.y_axis, second.title)

    def test_reused_plot_data_is_reset(self, run_metrics: RunMetrics):
        data = PlotData()
        plot_by_lane(run_metrics, MetricType.Density, FilterOptions(), data)
        plot_by_lane(run_metrics, MetricType.PercentPF, FilterOptions(), data)
        assert len(data) == 1

    def test_rejected_filter_clears_previous_plot(self, run_metrics: RunMetrics):
        data = plot(run_metrics, MetricType.Density)
        with pytest.raises(InvalidFilterOption):
            plot_by_lane(run_metrics, MetricType.Density, FilterOptions(lane=5), data)
        assert len(data) == 0
        assert data.title == ""

    def test_lane_selector_without_run_layout(self, tile_metrics: MetricSet):
        metrics = RunMetrics(tile_metric_set=tile_metrics)
        data = plot(metrics, MetricType.Density, FilterOptions(lane=2))
        assert [p.x for p in data[0]] == [2.0]
        assert [p.p50 for p in data[0]] == [210.0]

    def test_surface_selector_without_run_layout(self, tile_metrics: MetricSet):
        metrics = RunMetrics(tile_metric_set=tile_metrics)
        data = plot(metrics, MetricType.Density, FilterOptions(surface=2))
        assert [p.p50 for p in data[0]] == [120.0, 220.0]
