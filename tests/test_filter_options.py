"""Tests for FilterOptions."""

import pytest

from multiqc_savplot.constants import MetricType, TileNaming
from multiqc_savplot.exceptions import InvalidFilterOption
from multiqc_savplot.filter_options import FilterOptions
from multiqc_savplot.model import QMetric, RunInfo, TileMetric


class TestValidTile:
    def test_permissive_by_default(self):
        options = FilterOptions()
        assert options.valid_tile(TileMetric(lane=3, tile=2216))
        assert options.valid_tile(QMetric(lane=1, tile=1101, cycle=7))

    def test_lane(self):
        options = FilterOptions(lane=2)
        assert options.valid_tile(TileMetric(lane=2, tile=1101))
        assert not options.valid_tile(TileMetric(lane=1, tile=1101))

    def test_surface_uses_naming_method(self):
        four_digit = FilterOptions(TileNaming.FourDigit, surface=2)
        assert four_digit.valid_tile(TileMetric(lane=1, tile=2101))
        assert not four_digit.valid_tile(TileMetric(lane=1, tile=1101))

        five_digit = FilterOptions(TileNaming.FiveDigit, surface=1)
        assert five_digit.valid_tile(TileMetric(lane=1, tile=11101))
        assert not five_digit.valid_tile(TileMetric(lane=1, tile=21101))

    def test_cycle_only_applies_to_cycle_records(self):
        options = FilterOptions(cycle=2)
        assert options.valid_tile(QMetric(lane=1, tile=1101, cycle=2))
        assert not options.valid_tile(QMetric(lane=1, tile=1101, cycle=1))
        assert options.valid_tile(TileMetric(lane=1, tile=1101))

    def test_all_dimensions_must_match(self):
        options = FilterOptions(lane=1, surface=1)
        assert options.valid_tile(TileMetric(lane=1, tile=1101))
        assert not options.valid_tile(TileMetric(lane=1, tile=2101))
        assert not options.valid_tile(TileMetric(lane=2, tile=1101))


class TestDescriptions:
    def test_all(self):
        options = FilterOptions()
        assert options.lane_description() == "All Lanes"
        assert options.surface_description() == "All Surfaces"
        assert options.read_description() == "All Reads"
        assert not options.is_specific_lane()
        assert not options.is_specific_surface()
        assert not options.is_specific_read()

    def test_specific(self):
        options = FilterOptions(lane=2, surface=2, read=1)
        assert options.lane_description() == "Lane 2"
        assert options.surface_description() == "Bottom"
        assert options.read_description() == "Read 1"
        assert FilterOptions(surface=1).surface_description() == "Top"
        assert FilterOptions(surface=3).surface_description() == "Surface 3"

    def test_is_specific_read_depends_on_metric(self):
        options = FilterOptions(read=1)
        assert options.is_specific_read()
        assert options.is_specific_read(MetricType.PercentPhasing)
        assert not options.is_specific_read(MetricType.Density)


class TestValidate:
    def test_defaults_are_valid(self, run_info: RunInfo):
        FilterOptions().validate(MetricType.Density, run_info)

    @pytest.mark.parametrize(
        "kwargs",
        [{"lane": 3}, {"lane": 0}, {"surface": 3}, {"read": 7}, {"cycle": 400}],
    )
    def test_out_of_run(self, run_info: RunInfo, kwargs):
        with pytest.raises(InvalidFilterOption):
            FilterOptions(**kwargs).validate(MetricType.Density, run_info)

    def test_reads_unknown_without_run_info_reads(self):
        FilterOptions(read=5).validate(MetricType.PercentPhasing, RunInfo())

    @pytest.mark.parametrize("kwargs", [{"lane": 2}, {"surface": 2}, {"lane": 8, "surface": 1}])
    def test_unknown_layout_accepts_any_positive_selector(self, kwargs):
        FilterOptions(**kwargs).validate(MetricType.Density, RunInfo())

    @pytest.mark.parametrize("kwargs", [{"lane": 0}, {"surface": 0}])
    def test_unknown_layout_still_rejects_non_positive(self, kwargs):
        with pytest.raises(InvalidFilterOption):
            FilterOptions(**kwargs).validate(MetricType.Density, RunInfo())
