"""Plot an arbitrary tile metric by lane as candle sticks."""

import logging
import math
from typing import Callable, Optional, Union

from multiqc_savplot.constants import (
    PF_COLOR,
    PF_METRICS,
    PRIMARY_COLOR,
    MetricType,
    parse_metric_type,
    to_description,
)
from multiqc_savplot.exceptions import IndexOutOfBoundsError
from multiqc_savplot.filter_options import FilterOptions
from multiqc_savplot.metric_value import TileMetricValue
from multiqc_savplot.model import MetricSet, RunMetrics
from multiqc_savplot.plot_data import PlotData, Series, auto_scale, join_title
from multiqc_savplot.statistics import candle_stick

log = logging.getLogger(__name__)

# Stretch of the y-range around the data
Y_PADDING = 1.2

# Metrics reported as fractions and always shown on a [0, 1] axis
FRACTION_METRICS = frozenset({MetricType.PercentPhasing, MetricType.PercentPrephasing})

MetricProxy = Callable[[object, MetricType], Optional[float]]


def populate_candle_stick_by_lane(
    metrics: MetricSet,
    proxy: MetricProxy,
    options: FilterOptions,
    metric_type: MetricType,
    points: list,
) -> None:
    """
    Plot the candle stick over all tiles of a specific metric by lane.

    Lanes without a single value are skipped, so ``points`` holds one
    point per populated lane in lane order.

    Args:
        metrics: set of metric records
        proxy: callable returning the metric value of a record, or None
        options: filter for metric records
        metric_type: type of metric to extract using the proxy
        points: output list; x is the lane number
    """
    points.clear()
    lane_count = metrics.max_lane
    if lane_count == 0:
        return

    tile_by_lane: list[list[float]] = [[] for _ in range(lane_count)]
    for metric in metrics:
        if not options.valid_tile(metric):
            continue
        value = proxy(metric, metric_type)
        if value is None or math.isnan(value):
            continue
        if metric.lane < 1:
            raise IndexOutOfBoundsError(f"Lane numbers start at 1, got {metric.lane}")
        tile_by_lane[metric.lane - 1].append(value)

    for index, values in enumerate(tile_by_lane):
        if not values:
            continue
        points.append(candle_stick(values, float(index + 1)))


def plot_by_lane(
    metrics: RunMetrics,
    metric_type: Union[MetricType, str],
    options: FilterOptions,
    data: PlotData,
) -> None:
    """
    Plot a specified metric value by lane.

    Density and cluster count are plotted together with their
    passing-filter counterpart as a second series.

    Args:
        metrics: run metrics
        metric_type: metric type, or its name
        options: options to filter the data
        data: output plot data

    Raises:
        InvalidMetricTypeError: unknown metric name
        InvalidFilterOption: a selector points outside the run
    """
    data.clear()
    metric_type = parse_metric_type(metric_type)
    options.validate(metric_type, metrics.run_info)
    description = to_description(metric_type)
    tile_metrics = metrics.tile_metric_set

    data.assign(1, Series(description, PRIMARY_COLOR))
    proxy = TileMetricValue(options.read)
    populate_candle_stick_by_lane(tile_metrics, proxy, options, metric_type, data[0].points)

    if metric_type in PF_METRICS:
        data.append(Series("PF", PF_COLOR))
        populate_candle_stick_by_lane(tile_metrics, proxy, options, PF_METRICS[metric_type], data[1].points)

    auto_scale(data, True, Y_PADDING)
    if metric_type in FRACTION_METRICS:
        data.set_yrange(0, 1)
    data.set_xrange(0, data.x_axis.max + 1)

    data.set_xlabel("Lane")
    data.set_ylabel(description)

    flowcell = metrics.run_info.flowcell
    title = join_title(
        flowcell.barcode,
        options.read_description() if options.is_specific_read(metric_type) else "",
        options.surface_description() if flowcell.surface_count > 1 and options.is_specific_surface() else "",
    )
    data.set_title(title)
    log.debug(f"Plotted {description} by lane: {sum(len(s) for s in data)} points in {len(data)} series")
