"""Selector deciding which metric records take part in a plot."""

from typing import Optional

from multiqc_savplot.constants import ALL_IDS, MetricType, TileNaming, is_read_metric
from multiqc_savplot.exceptions import InvalidFilterOption
from multiqc_savplot.model import RunInfo

SURFACE_NAMES = {1: "Top", 2: "Bottom"}


class FilterOptions:
    """
    Filter metric records by lane, surface, read, cycle, channel and base.

    Every selector defaults to ``ALL_IDS`` (no filtering on that dimension).
    The tile naming method is needed to derive the surface from a tile id.
    """

    def __init__(
        self,
        naming_method: TileNaming = TileNaming.FourDigit,
        lane: Optional[int] = ALL_IDS,
        surface: Optional[int] = ALL_IDS,
        read: Optional[int] = ALL_IDS,
        cycle: Optional[int] = ALL_IDS,
        channel: Optional[int] = ALL_IDS,
        base: Optional[int] = ALL_IDS,
    ) -> None:
        self.naming_method = naming_method
        self.lane = lane
        self.surface = surface
        self.read = read
        self.cycle = cycle
        self.channel = channel
        self.base = base

    def valid_tile(self, metric) -> bool:
        """True if the record matches every active selector."""
        if self.lane is not ALL_IDS and metric.lane != self.lane:
            return False
        if self.surface is not ALL_IDS and metric.surface(self.naming_method) != self.surface:
            return False
        cycle = getattr(metric, "cycle", None)
        if self.cycle is not ALL_IDS and cycle is not None and cycle != self.cycle:
            return False
        return True

    def is_specific_lane(self) -> bool:
        return self.lane is not ALL_IDS

    def is_specific_surface(self) -> bool:
        return self.surface is not ALL_IDS

    def is_specific_read(self, metric_type: Optional[MetricType] = None) -> bool:
        """True if a read is selected and, when given, the metric is recorded per read."""
        if self.read is ALL_IDS:
            return False
        return metric_type is None or is_read_metric(metric_type)

    def lane_description(self) -> str:
        return "All Lanes" if self.lane is ALL_IDS else f"Lane {self.lane}"

    def surface_description(self) -> str:
        if self.surface is ALL_IDS:
            return "All Surfaces"
        return SURFACE_NAMES.get(self.surface, f"Surface {self.surface}")

    def read_description(self) -> str:
        return "All Reads" if self.read is ALL_IDS else f"Read {self.read}"

    def validate(self, metric_type: Optional[MetricType], run_info: RunInfo) -> None:
        """
        Check the selectors against the run description.

        Raises:
            InvalidFilterOption: a selector points outside the run
        """
        flowcell = run_info.flowcell
        if self.lane is not ALL_IDS:
            if self.lane < 1 or (flowcell.lane_count and self.lane > flowcell.lane_count):
                raise InvalidFilterOption(f"Lane {self.lane} outside [1, {flowcell.lane_count or '?'}]")
        if self.surface is not ALL_IDS:
            if self.surface < 1 or (flowcell.surface_count and self.surface > flowcell.surface_count):
                raise InvalidFilterOption(f"Surface {self.surface} outside [1, {flowcell.surface_count or '?'}]")
        if self.read is not ALL_IDS and run_info.reads:
            if self.read not in {r.number for r in run_info.reads}:
                raise InvalidFilterOption(f"Read {self.read} not found in run")
        if self.cycle is not ALL_IDS and run_info.reads and not 1 <= self.cycle <= run_info.total_cycles:
            raise InvalidFilterOption(f"Cycle {self.cycle} outside [1, {run_info.total_cycles}]")

    def __repr__(self) -> str:
        return (
            f"FilterOptions(lane={self.lane}, surface={self.surface}, read={self.read}, "
            f"cycle={self.cycle}, channel={self.channel}, base={self.base})"
        )
