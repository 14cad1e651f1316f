"""Logic shared by the Q-metric plots."""

import logging

import numpy as np

from multiqc_savplot.model import QByLaneMetric, QMetricSet

log = logging.getLogger(__name__)


def is_compressed(q_metric_set: QMetricSet) -> bool:
    return q_metric_set.is_compressed


def max_qval(q_metric_set: QMetricSet) -> int:
    return q_metric_set.max_qval()


def create_q_metrics_by_lane(q_metric_set: QMetricSet) -> QMetricSet:
    """
    Sum the per-tile Q-score histograms of each lane and cycle.

    Args:
        q_metric_set: per-tile Q-metrics

    Returns:
        Q-metrics by lane, ordered by lane then cycle, sharing the bins of the source set
    """
    totals: dict[tuple[int, int], np.ndarray] = {}
    for metric in q_metric_set:
        key = (metric.lane, metric.cycle)
        hist = np.asarray(metric.histogram, dtype=np.int64)
        if key not in totals:
            totals[key] = hist.copy()
            continue
        total = totals[key]
        if hist.size > total.size:
            total = np.pad(total, (0, hist.size - total.size))
        total[: hist.size] += hist
        totals[key] = total

    records = [
        QByLaneMetric(lane=lane, tile=0, cycle=cycle, histogram=tuple(int(v) for v in totals[(lane, cycle)]))
        for lane, cycle in sorted(totals)
    ]
    log.debug(f"Built {len(records)} Q-metric by lane records from {q_metric_set.size} tile records")
    return QMetricSet(records, bins=q_metric_set.bins)
