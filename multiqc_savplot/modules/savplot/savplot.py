"""
MultiQC module for SAV plots built from Illumina InterOp data.

Adds a candle-stick summary per lane for each configured tile metric and
the Q-score heatmap of every run folder found.
"""

import glob
import logging
import os
from typing import Any

from multiqc import config
from multiqc.base_module import BaseMultiqcModule, ModuleNoSamplesFound
from multiqc.plots import heatmap, table

from multiqc_savplot.constants import MetricType, parse_metric_type, to_description
from multiqc_savplot.exceptions import InvalidMetricTypeError, SavPlotError
from multiqc_savplot.filter_options import FilterOptions
from multiqc_savplot.interop_io import read_run_metrics
from multiqc_savplot.model import RunMetrics
from multiqc_savplot.plot_by_lane import plot_by_lane
from multiqc_savplot.plot_data import CandleStickPoint, HeatmapData, PlotData
from multiqc_savplot.plot_qscore_heatmap import plot_qscore_heatmap

log = logging.getLogger(__name__)

DEFAULT_BY_LANE_METRICS = ["Density", "ClusterCount"]

CANDLE_HEADERS: dict[str, dict] = {
    "Lower": {
        "title": "Lower whisker",
        "description": "Smallest tile value within 1.5 IQR of the first quartile",
        "format": "{:,.2f}",
        "scale": "Blues",
    },
    "Q1": {
        "title": "Q1",
        "description": "First quartile over tiles",
        "format": "{:,.2f}",
        "scale": "Blues",
    },
    "Median": {
        "title": "Median",
        "description": "Median over tiles",
        "format": "{:,.2f}",
        "scale": "Blues",
    },
    "Q3": {
        "title": "Q3",
        "description": "Third quartile over tiles",
        "format": "{:,.2f}",
        "scale": "Blues",
    },
    "Upper": {
        "title": "Upper whisker",
        "description": "Largest tile value within 1.5 IQR of the third quartile",
        "format": "{:,.2f}",
        "scale": "Blues",
    },
    "Outliers": {
        "title": "Outliers",
        "description": "Number of tiles outside the whiskers",
        "format": "{:,.0f}",
        "scale": "OrRd",
    },
}

HEATMAP_COLSTOPS = [
    [0, "#FFFFFF"],
    [0.1, "#1a9850"],
    [0.2, "#66bd63"],
    [0.3, "#a6d96a"],
    [0.4, "#d9ef8b"],
    [0.5, "#ffffbf"],
    [0.6, "#fee08b"],
    [0.7, "#fdae61"],
    [0.8, "#f46d43"],
    [0.9, "#d73027"],
    [1, "#a50026"],
]


class SAVPlotModule(BaseMultiqcModule):
    """
    SAVPlot module for Illumina InterOp metrics.

    Required files:

    - `RunInfo.xml`
    - `InterOp/*.bin` files
    """

    def __init__(self) -> None:
        super().__init__(
            name="SAVPlot",
            anchor="savplot",
            href="https://github.com/Illumina/interop",
            info="Plots InterOp tile metrics by lane and the Q-score heatmap.",
        )

        # Find run directories with RunInfo.xml and InterOp files
        run_dirs: dict[str, str] = {}
        for f in self.find_log_files("savplot/runinfo"):
            run_dir = f["root"]
            run_name = os.path.basename(os.path.abspath(run_dir)) or f["s_name"]

            if not glob.glob(os.path.join(run_dir, "InterOp", "*.bin")):
                log.debug(f"No InterOp .bin files found for {run_name}")
                continue

            if run_name in run_dirs:
                log.debug(f"Duplicate run name found! Overwriting: {run_name}")

            self.add_data_source(f, s_name=run_name)
            self.add_software_version(None, sample=run_name)
            run_dirs[run_name] = run_dir

        # Filter ignored samples
        run_dirs = self.ignore_samples(run_dirs)

        if len(run_dirs) == 0:
            raise ModuleNoSamplesFound

        log.info(f"Found {len(run_dirs)} sequencing run(s)")

        metric_types = by_lane_metrics()
        self.savplot_data: dict[str, dict] = {}
        for run_name, run_dir in run_dirs.items():
            try:
                run_metrics = read_run_metrics(run_dir)
            except SavPlotError as e:
                log.warning(f"Failed to load InterOp metrics from {run_dir}: {e}")
                continue

            for metric_type in metric_types:
                self._add_by_lane_section(run_name, run_metrics, metric_type)
            self._add_qscore_heatmap_section(run_name, run_metrics)

        # Write data file at the END
        self.write_data_file(self.savplot_data, "multiqc_savplot")

    def _add_by_lane_section(self, run_name: str, run_metrics: RunMetrics, metric_type: MetricType) -> None:
        """Add the candle-stick table of one metric by lane."""
        log.info(f"Generating '{to_description(metric_type)} by lane' for {run_name}")
        options = FilterOptions(run_metrics.run_info.flowcell.naming_method)
        data = PlotData()
        plot_by_lane(run_metrics, metric_type, options, data)

        table_data = candle_table_data(data)
        if not table_data:
            log.debug(f"No {to_description(metric_type)} values for {run_name}")
            return
        self.savplot_data.update({f"{run_name} - {key}": row for key, row in table_data.items()})

        anchor = f"savplot-{run_name}-{metric_type.name.lower()}-by-lane"
        self.add_section(
            name=f"{to_description(metric_type)} by Lane",
            anchor=anchor,
            description=f"Distribution of {to_description(metric_type)} over the tiles of each lane of {data.title or run_name}.",
            plot=table.plot(
                table_data,
                CANDLE_HEADERS,
                pconfig={
                    "id": f"{anchor}-table",
                    "title": f"SAVPlot: {to_description(metric_type)} by Lane",
                    "namespace": "SAVPlot",
                    "col1_header": "Lane - Series",
                },
            ),
        )

    def _add_qscore_heatmap_section(self, run_name: str, run_metrics: RunMetrics) -> None:
        """Add the Q-score heatmap of a run."""
        log.info(f"Generating 'Qscore Heatmap' for {run_name}")
        options = FilterOptions(run_metrics.run_info.flowcell.naming_method)
        data = HeatmapData()
        plot_qscore_heatmap(run_metrics, options, data)
        if data.empty:
            log.debug(f"No Q-metrics for {run_name}")
            return

        plot_data, x_cats, y_cats = heatmap_plot_data(data)
        anchor = f"savplot-{run_name}-qscore-heatmap"
        self.add_section(
            name="Qscore Heatmap",
            anchor=anchor,
            description="The Qscore Heat Map provides an overview of quality scores across cycles.",
            plot=heatmap.plot(
                plot_data,
                xcats=x_cats,
                ycats=y_cats,
                pconfig={
                    "id": f"{anchor}-plot",
                    "title": f"SAVPlot: Qscore Heatmap {data.title}".strip(),
                    "xlab": data.x_axis.label,
                    "ylab": data.y_axis.label,
                    "square": False,
                    "colstops": HEATMAP_COLSTOPS,
                },
            ),
        )


def by_lane_metrics() -> list[MetricType]:
    """Metrics to plot by lane, from the command line or the MultiQC config."""
    names = (getattr(config, "kwargs", None) or {}).get("savplot_metric")
    if not names:
        names = (getattr(config, "savplot", None) or {}).get("by_lane_metrics", DEFAULT_BY_LANE_METRICS)

    metric_types: list[MetricType] = []
    for name in names:
        try:
            metric_types.append(parse_metric_type(name))
        except InvalidMetricTypeError as e:
            log.warning(f"SAVPlot - skipping metric: {e}")
    return metric_types


def candle_table_data(data: PlotData) -> dict[str, dict[str, Any]]:
    """One table row per lane and series."""
    table_data: dict[str, dict[str, Any]] = {}
    for series in data:
        for point in series:
            if not isinstance(point, CandleStickPoint):
                continue
            table_data[f"Lane {point.x:g} - {series.title}"] = {
                "Lower": point.lower,
                "Q1": point.p25,
                "Median": point.p50,
                "Q3": point.p75,
                "Upper": point.upper,
                "Outliers": len(point.outliers),
            }
    return table_data


def heatmap_plot_data(data: HeatmapData) -> tuple[list[list[float]], list[int], list[int]]:
    """Heatmap rows as Q-scores and columns as cycles, with their categories."""
    # heatmap expects: rows match ycats, cols match xcats
    plot_data = data.data.transpose().tolist()
    x_cats = list(range(1, data.row_count + 1))  # cycles
    y_cats = list(range(1, data.column_count + 1))  # qscores
    return plot_data, x_cats, y_cats
