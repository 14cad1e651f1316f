"""
Run metric model consumed by the plot engines.

Records are immutable once loaded. Metric sets are ordered collections of
one record type; the run metrics object bundles the sets of a run together
with the run description parsed from RunInfo.xml.
"""

import logging
import math
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from multiqc_savplot.constants import TileNaming, parse_tile_naming
from multiqc_savplot.exceptions import IndexOutOfBoundsError, MalformedXmlError, MissingRunInfoError

log = logging.getLogger(__name__)

NAN = float("nan")


def surface_of_tile(tile: int, naming: TileNaming) -> int:
    """Surface number encoded in a tile id (1 = top, 2 = bottom)."""
    if naming == TileNaming.FourDigit:
        return tile // 1000
    if naming == TileNaming.FiveDigit:
        return tile // 10000
    return 1


#############
# RECORDS
#############


@dataclass(frozen=True)
class ReadMetric:
    """Per-read channels of a tile metric record."""

    read: int
    percent_aligned: float = NAN
    percent_phasing: float = NAN
    percent_prephasing: float = NAN


@dataclass(frozen=True)
class TileMetric:
    """Cluster density and count of a single tile, with per-read channels."""

    lane: int
    tile: int
    cluster_density: float = NAN
    cluster_density_pf: float = NAN
    cluster_count: float = NAN
    cluster_count_pf: float = NAN
    reads: tuple[ReadMetric, ...] = ()

    def read(self, number: int) -> ReadMetric:
        for read_metric in self.reads:
            if read_metric.read == number:
                return read_metric
        raise IndexOutOfBoundsError(f"Read {number} not found for tile {self.lane}_{self.tile}")

    @property
    def percent_pf(self) -> float:
        if not self.cluster_count or math.isnan(self.cluster_count):
            return NAN
        return 100.0 * self.cluster_count_pf / self.cluster_count

    def surface(self, naming: TileNaming = TileNaming.FourDigit) -> int:
        return surface_of_tile(self.tile, naming)


@dataclass(frozen=True)
class QScoreBin:
    """
    Q-score compression bin.

    All values are 1-based and inclusive: ``value`` is the score reported
    for every base whose original score lies in ``[lower, upper]``.
    """

    lower: int
    upper: int
    value: int

    def __post_init__(self) -> None:
        if self.lower < 1:
            raise ValueError(f"Bin lower bound must be at least 1, got {self.lower}")
        if not self.lower <= self.value <= self.upper:
            raise ValueError(f"Bin value {self.value} outside [{self.lower}, {self.upper}]")


@dataclass(frozen=True)
class QMetric:
    """Q-score histogram of a tile for one cycle."""

    lane: int
    tile: int
    cycle: int
    histogram: tuple[int, ...] = ()

    @property
    def size(self) -> int:
        return len(self.histogram)

    def qscore_hist(self, index: int) -> int:
        if not 0 <= index < len(self.histogram):
            raise IndexOutOfBoundsError(f"Q-score histogram index {index} out of range [0, {len(self.histogram)})")
        return self.histogram[index]

    def sum_qscore(self) -> int:
        return sum(self.histogram)

    def surface(self, naming: TileNaming = TileNaming.FourDigit) -> int:
        return surface_of_tile(self.tile, naming)


@dataclass(frozen=True)
class QByLaneMetric(QMetric):
    """Q-score histogram summed over all tiles of a lane for one cycle (tile id 0)."""


#############
# METRIC SETS
#############


class MetricSet:
    """Ordered collection of metric records of one type."""

    def __init__(self, records: Optional[Iterable] = None) -> None:
        self._records = list(records) if records is not None else []

    def __iter__(self) -> Iterator:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int):
        return self._records[index]

    @property
    def size(self) -> int:
        return len(self._records)

    @property
    def max_lane(self) -> int:
        return max((r.lane for r in self._records), default=0)

    @property
    def max_cycle(self) -> int:
        return max((getattr(r, "cycle", 0) for r in self._records), default=0)

    def lanes(self) -> list[int]:
        return sorted({r.lane for r in self._records})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size}, max_lane={self.max_lane})"


class QMetricSet(MetricSet):
    """Q-metric records plus the bins used to compress their histograms."""

    def __init__(self, records: Optional[Iterable] = None, bins: Optional[Iterable[QScoreBin]] = None) -> None:
        super().__init__(records)
        self.bins: list[QScoreBin] = list(bins) if bins is not None else []

    @property
    def bin_count(self) -> int:
        return len(self.bins)

    @property
    def is_compressed(self) -> bool:
        """True when histograms are indexed by bin rather than by score."""
        if not self.bins:
            return False
        return all(r.size <= len(self.bins) for r in self)

    def max_qval(self) -> int:
        """Largest Q-score covered by the bins or by an uncompressed histogram."""
        max_q = max((b.upper for b in self.bins), default=0)
        if not self.is_compressed:
            max_q = max(max_q, max((r.size for r in self), default=0))
        return max_q


#############
# RUN INFO
#############


@dataclass(frozen=True)
class ReadInfo:
    number: int
    num_cycles: int
    is_index: bool = False


@dataclass(frozen=True)
class Flowcell:
    """Flowcell layout; a lane or surface count of 0 means the layout is unknown."""

    barcode: str = ""
    lane_count: int = 0
    surface_count: int = 0
    swath_count: int = 1
    tile_count: int = 1
    naming_method: TileNaming = TileNaming.FourDigit


@dataclass(frozen=True)
class RunInfo:
    """Run description parsed from RunInfo.xml."""

    name: str = ""
    flowcell: Flowcell = field(default_factory=Flowcell)
    reads: tuple[ReadInfo, ...] = ()

    @property
    def total_cycles(self) -> int:
        return sum(r.num_cycles for r in self.reads)

    @classmethod
    def parse(cls, run_info_xml: str) -> "RunInfo":
        """
        Parse RunInfo.xml.

        Raises:
            MissingRunInfoError: the file does not exist
            MalformedXmlError: the file is not XML or has no Run element
        """
        if not os.path.isfile(run_info_xml):
            raise MissingRunInfoError(f"RunInfo.xml not found: {run_info_xml}")
        log.debug(f"Parsing {run_info_xml}")
        try:
            root = ET.parse(run_info_xml).getroot()
        except ET.ParseError as e:
            raise MalformedXmlError(f"Could not parse {run_info_xml}: {e}") from e

        run = root.find("Run")
        if run is None:
            raise MalformedXmlError(f"No Run element in {run_info_xml}")

        try:
            reads = tuple(
                ReadInfo(
                    number=int(read.attrib["Number"]),
                    num_cycles=int(read.attrib["NumCycles"]),
                    is_index=read.attrib.get("IsIndexedRead", "N") == "Y",
                )
                for read in run.iter("Read")
            )
            layout = run.find("FlowcellLayout")
            layout_attrib = layout.attrib if layout is not None else {}
            tile_set = layout.find("TileSet") if layout is not None else None
            naming = parse_tile_naming(tile_set.attrib.get("TileNamingConvention") if tile_set is not None else None)
            flowcell = Flowcell(
                barcode=(run.findtext("Flowcell") or "").strip(),
                lane_count=int(layout_attrib.get("LaneCount", 1)),
                surface_count=int(layout_attrib.get("SurfaceCount", 1)),
                swath_count=int(layout_attrib.get("SwathCount", 1)),
                tile_count=int(layout_attrib.get("TileCount", 1)),
                naming_method=naming,
            )
        except (KeyError, ValueError) as e:
            raise MalformedXmlError(f"Invalid RunInfo.xml {run_info_xml}: {e}") from e

        return cls(name=run.attrib.get("Id", ""), flowcell=flowcell, reads=reads)


#############
# RUN METRICS
#############


class RunMetrics:
    """All metric sets of a run together with its RunInfo."""

    def __init__(
        self,
        run_info: Optional[RunInfo] = None,
        tile_metric_set: Optional[MetricSet] = None,
        q_metric_set: Optional[QMetricSet] = None,
        q_by_lane_metric_set: Optional[QMetricSet] = None,
    ) -> None:
        self.run_info = run_info if run_info is not None else RunInfo()
        self.tile_metric_set = tile_metric_set if tile_metric_set is not None else MetricSet()
        self.q_metric_set = q_metric_set if q_metric_set is not None else QMetricSet()
        self.q_by_lane_metric_set = q_by_lane_metric_set if q_by_lane_metric_set is not None else QMetricSet()

    def get_set(self, record_type: type) -> MetricSet:
        """Metric set holding records of ``record_type``."""
        if record_type is TileMetric:
            return self.tile_metric_set
        if record_type is QByLaneMetric:
            return self.q_by_lane_metric_set
        if record_type is QMetric:
            return self.q_metric_set
        raise ValueError(f"No metric set for {record_type.__name__}")

    def is_empty(self) -> bool:
        return not (self.tile_metric_set.size or self.q_metric_set.size or self.q_by_lane_metric_set.size)

    @classmethod
    def read(cls, run_dir: str) -> "RunMetrics":
        """Load RunInfo.xml and the InterOp files of a run folder."""
        from multiqc_savplot.interop_io import read_run_metrics

        return read_run_metrics(run_dir)
