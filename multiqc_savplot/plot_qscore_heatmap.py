"""Plot the Q-score heatmap."""

import logging

import numpy as np

from multiqc_savplot.exceptions import IndexOutOfBoundsError, InteropAssertionError
from multiqc_savplot.filter_options import FilterOptions
from multiqc_savplot.model import QMetric, QMetricSet, QScoreBin, RunMetrics
from multiqc_savplot.plot_data import HeatmapData, join_title
from multiqc_savplot.q_metric import create_q_metrics_by_lane, is_compressed, max_qval

log = logging.getLogger(__name__)


def _cycle_row(metric: QMetric, data: HeatmapData) -> int:
    row = metric.cycle - 1
    if not 0 <= row < data.row_count:
        raise IndexOutOfBoundsError(f"Cycle {metric.cycle} outside heatmap of {data.row_count} cycles")
    return row


def populate_heatmap_from_compressed(
    metrics: QMetricSet,
    bins: list[QScoreBin],
    options: FilterOptions,
    data: HeatmapData,
) -> None:
    """Add bin-indexed histograms into the column of each bin's value."""
    columns = np.array([b.value - 1 for b in bins], dtype=np.intp)
    for metric in metrics:
        if not options.valid_tile(metric):
            continue
        counts = [metric.qscore_hist(index) for index in range(len(bins))]
        np.add.at(data.data[_cycle_row(metric, data)], columns, counts)


def populate_heatmap_from_uncompressed(metrics: QMetricSet, options: FilterOptions, data: HeatmapData) -> None:
    """Add score-indexed histograms column by column."""
    for metric in metrics:
        if not options.valid_tile(metric):
            continue
        if metric.size > data.column_count:
            raise IndexOutOfBoundsError(f"Histogram of {metric.size} scores wider than heatmap ({data.column_count})")
        data.data[_cycle_row(metric, data), : metric.size] += metric.histogram


def normalize_heatmap(data: HeatmapData) -> None:
    """
    Rescale the heat map to a percent of its maximum cell.

    A grid without counts is left at zero.
    """
    max_value = data.max_value()
    if max_value <= 0:
        log.debug("Q-score heatmap has no counts, skipping normalization")
        return
    data.data = 100.0 * data.data / max_value


def remap_to_bins(bins: list[QScoreBin], max_cycle: int, data: HeatmapData) -> None:
    """
    Spread each bin's column over the Q-scores the bin covers.

    Representative columns are read before any column is written.
    """
    representatives = [data.data[:max_cycle, b.value - 1].copy() for b in bins]
    for b, column in zip(bins, representatives):
        data.data[:max_cycle, max(0, b.lower - 1) : b.upper] = column[:, np.newaxis]


def populate_heatmap(metric_set: QMetricSet, options: FilterOptions, data: HeatmapData) -> None:
    """
    Fold Q-score histograms into a cycle by Q-score heat map.

    Args:
        metric_set: q-metrics (full or by lane)
        options: options to filter the data
        data: output heat map data

    Raises:
        IndexOutOfBoundsError: a record lies outside the bins or the grid
        InteropAssertionError: records exist but the grid would be empty
    """
    max_q = max_qval(metric_set)
    max_cycle = metric_set.max_cycle
    data.resize(max_cycle, max_q)
    if data.row_count == 0 or data.column_count == 0:
        raise InteropAssertionError(
            f"Empty heatmap ({max_cycle} cycles, {max_q} scores) for {metric_set.size} records "
            f"with {metric_set.bin_count} bins"
        )

    if is_compressed(metric_set):
        populate_heatmap_from_compressed(metric_set, metric_set.bins, options, data)
    else:
        populate_heatmap_from_uncompressed(metric_set, options, data)
    normalize_heatmap(data)
    remap_to_bins(metric_set.bins, max_cycle, data)


def plot_qscore_heatmap(metrics: RunMetrics, options: FilterOptions, data: HeatmapData) -> None:
    """
    Plot a heat map of q-scores.

    Surface-specific plots use the per-tile Q-metrics; otherwise the
    per-lane Q-metrics are used, built from the per-tile set and stored on
    ``metrics`` when missing.

    Args:
        metrics: run metrics
        options: options to filter the data
        data: output heat map data
    """
    data.clear()
    options.validate(None, metrics.run_info)
    if options.is_specific_surface():
        metric_set = metrics.q_metric_set
    else:
        if metrics.q_by_lane_metric_set.size == 0:
            metrics.q_by_lane_metric_set = create_q_metrics_by_lane(metrics.q_metric_set)
        metric_set = metrics.q_by_lane_metric_set
    if metric_set.size == 0:
        log.debug("No Q-metrics to plot")
        return

    populate_heatmap(metric_set, options, data)

    data.set_xrange(0, data.row_count)
    data.set_yrange(0, data.column_count)

    data.set_xlabel("Cycle")
    data.set_ylabel("Q Score")

    flowcell = metrics.run_info.flowcell
    title = join_title(
        flowcell.barcode,
        options.lane_description(),
        options.surface_description() if flowcell.surface_count > 1 and options.is_specific_surface() else "",
    )
    data.set_title(title)
