"""Extract a single metric value from a metric record."""

import math
from typing import Optional

from multiqc_savplot.constants import ALL_IDS, MetricType
from multiqc_savplot.exceptions import IndexOutOfBoundsError
from multiqc_savplot.model import TileMetric


class TileMetricValue:
    """
    Read a tile metric value by metric type.

    Calling the proxy with a record returns ``None`` when the record does not
    carry the metric: the channel is NaN, the metric is per read and no read
    is selected, or the selected read is missing from the record.
    """

    def __init__(self, read: Optional[int] = ALL_IDS) -> None:
        self.read = read

    def __call__(self, metric: TileMetric, metric_type: MetricType) -> Optional[float]:
        if metric_type == MetricType.Density:
            value = metric.cluster_density
        elif metric_type == MetricType.DensityPF:
            value = metric.cluster_density_pf
        elif metric_type == MetricType.ClusterCount:
            value = metric.cluster_count
        elif metric_type == MetricType.ClusterCountPF:
            value = metric.cluster_count_pf
        elif metric_type == MetricType.PercentPF:
            value = metric.percent_pf
        else:
            value = self._read_value(metric, metric_type)
        if value is None or math.isnan(value):
            return None
        return float(value)

    def _read_value(self, metric: TileMetric, metric_type: MetricType) -> Optional[float]:
        if self.read is ALL_IDS:
            return None
        try:
            read_metric = metric.read(self.read)
        except IndexOutOfBoundsError:
            return None
        if metric_type == MetricType.PercentAligned:
            return read_metric.percent_aligned
        if metric_type == MetricType.PercentPhasing:
            return read_metric.percent_phasing
        if metric_type == MetricType.PercentPrephasing:
            return read_metric.percent_prephasing
        raise ValueError(f"Unsupported tile metric type: {metric_type}")
