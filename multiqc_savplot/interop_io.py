"""
Load run metrics from an Illumina run folder.

RunInfo.xml is parsed here; the InterOp binary files are parsed by the
Illumina InterOp library and converted into the records of ``model``.
"""

import logging
import os
from typing import Any

from multiqc_savplot.exceptions import BadFormatError
from multiqc_savplot.model import (
    MetricSet,
    QMetric,
    QMetricSet,
    QScoreBin,
    ReadMetric,
    RunInfo,
    RunMetrics,
    TileMetric,
)

log = logging.getLogger(__name__)


def read_run_metrics(run_dir: str) -> RunMetrics:
    """
    Read RunInfo.xml and the tile and Q-metric InterOp files of a run folder.

    Raises:
        MissingRunInfoError: RunInfo.xml is missing
        MalformedXmlError: RunInfo.xml cannot be parsed
        BadFormatError: an InterOp file cannot be parsed
    """
    run_info = RunInfo.parse(os.path.join(run_dir, "RunInfo.xml"))

    log.info(f"Loading InterOp metrics from {run_dir}")
    interop_metrics = _read_interop(run_dir)

    tile_metric_set = convert_tile_metrics(interop_metrics.tile_metric_set())
    q_metric_set = convert_q_metrics(interop_metrics.q_metric_set())
    log.debug(f"Loaded {tile_metric_set.size} tile metrics and {q_metric_set.size} Q-metrics")
    return RunMetrics(run_info=run_info, tile_metric_set=tile_metric_set, q_metric_set=q_metric_set)


def _read_interop(run_dir: str) -> Any:
    import interop

    try:
        return interop.read(
            run=run_dir,
            valid_to_load=interop.load_summary_metrics(),
            finalize=True,
        )
    except (OSError, RuntimeError) as e:
        raise BadFormatError(f"Failed to load InterOp metrics from {run_dir}: {e}") from e


def convert_tile_metrics(interop_set: Any) -> MetricSet:
    """Convert an InterOp tile metric set into ``TileMetric`` records."""
    records = []
    for index in range(interop_set.size()):
        metric = interop_set.at(index)
        reads = tuple(
            ReadMetric(
                read=read.read(),
                percent_aligned=read.percent_aligned(),
                percent_phasing=read.percent_phasing(),
                percent_prephasing=read.percent_prephasing(),
            )
            for read in metric.read_metrics()
        )
        records.append(
            TileMetric(
                lane=metric.lane(),
                tile=metric.tile(),
                cluster_density=metric.cluster_density(),
                cluster_density_pf=metric.cluster_density_pf(),
                cluster_count=metric.cluster_count(),
                cluster_count_pf=metric.cluster_count_pf(),
                reads=reads,
            )
        )
    return MetricSet(records)


def convert_q_metrics(interop_set: Any) -> QMetricSet:
    """Convert an InterOp Q-metric set into ``QMetric`` records and bins."""
    # Some instruments report a lower bound of 0; score 0 shares the first column
    bins = [QScoreBin(lower=max(1, b.lower()), upper=b.upper(), value=b.value()) for b in interop_set.bins()]
    records = []
    for index in range(interop_set.size()):
        metric = interop_set.at(index)
        records.append(
            QMetric(
                lane=metric.lane(),
                tile=metric.tile(),
                cycle=metric.cycle(),
                histogram=tuple(int(metric.qscore_hist(i)) for i in range(metric.size())),
            )
        )
    return QMetricSet(records, bins=bins)
