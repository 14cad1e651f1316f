"""Metric types, tile naming conventions and plot constants."""

from enum import Enum
from typing import Optional, Union

from multiqc_savplot.exceptions import InvalidMetricTypeError

# Selector value meaning "every lane / surface / read / cycle"
ALL_IDS: Optional[int] = None

PRIMARY_COLOR = "Blue"
PF_COLOR = "DarkGreen"


class MetricType(Enum):
    """Tile metrics that can be summarised by lane."""

    Density = "Density"
    DensityPF = "Density PF"
    ClusterCount = "Cluster Count"
    ClusterCountPF = "Cluster Count PF"
    PercentPF = "% PF"
    PercentAligned = "% Aligned"
    PercentPhasing = "% Phasing"
    PercentPrephasing = "% Prephasing"


class TileNaming(Enum):
    """Tile naming convention of a flowcell, taken from RunInfo.xml."""

    FourDigit = "FourDigit"
    FiveDigit = "FiveDigit"
    Absolute = "Absolute"


READ_METRICS = frozenset(
    {
        MetricType.PercentAligned,
        MetricType.PercentPhasing,
        MetricType.PercentPrephasing,
    }
)

# Metrics plotted together with their passing-filter counterpart
PF_METRICS = {
    MetricType.Density: MetricType.DensityPF,
    MetricType.ClusterCount: MetricType.ClusterCountPF,
}


def to_description(metric_type: MetricType) -> str:
    return metric_type.value


def is_read_metric(metric_type: MetricType) -> bool:
    """True if the metric is recorded per read rather than per tile."""
    return metric_type in READ_METRICS


def parse_metric_type(name: Union[str, MetricType]) -> MetricType:
    """
    Parse a metric type from its name or description.

    Names are matched case-insensitively, so "clustercountpf" and
    "Cluster Count PF" both resolve to ``MetricType.ClusterCountPF``.

    Raises:
        InvalidMetricTypeError: the name matches no metric type
    """
    if isinstance(name, MetricType):
        return name
    key = str(name).strip().lower()
    for metric_type in MetricType:
        if key in (metric_type.name.lower(), metric_type.value.lower()):
            return metric_type
    raise InvalidMetricTypeError(f"Invalid metric type: {name!r}")


def parse_tile_naming(name: Optional[str]) -> TileNaming:
    """Parse a TileNamingConvention attribute, defaulting to FourDigit."""
    if not name:
        return TileNaming.FourDigit
    for naming in TileNaming:
        if naming.value.lower() == name.strip().lower():
            return naming
    return TileNaming.FourDigit
