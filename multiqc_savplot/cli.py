#!/usr/bin/env python
""" Command line tools writing SAV plot data to standard output. The
MultiQC command line option of the plugin is also defined here. """

import logging
import sys
from enum import IntEnum
from typing import Optional

import click

from multiqc_savplot import __version__
from multiqc_savplot.constants import parse_metric_type
from multiqc_savplot.exceptions import (
    BadFormatError,
    IndexOutOfBoundsError,
    InvalidFilterOption,
    InvalidMetricTypeError,
    MalformedXmlError,
    MissingRunInfoError,
    SavPlotError,
)
from multiqc_savplot.filter_options import FilterOptions
from multiqc_savplot.interop_io import read_run_metrics
from multiqc_savplot.model import RunMetrics
from multiqc_savplot.plot_by_lane import plot_by_lane
from multiqc_savplot.plot_data import HeatmapData, PlotData
from multiqc_savplot.plot_qscore_heatmap import plot_qscore_heatmap

log = logging.getLogger(__name__)

savplot_metric = click.option(
    "--savplot-metric",
    "savplot_metric",
    multiple=True,
    help="MultiQC_SAVPlot plugin: tile metric to plot by lane (repeatable)",
)


class ExitCode(IntEnum):
    """Exit codes that can be produced by the commands."""

    SUCCESS = 0
    INVALID_ARGUMENTS = 1
    BAD_FORMAT = 2
    UNEXPECTED_EXCEPTION = 3
    EMPTY_INTEROP = 4
    MISSING_RUNINFO_XML = 5
    MALFORMED_XML = 6


def load_run_metrics(run_folder: str) -> tuple[Optional[RunMetrics], ExitCode]:
    """Read run metrics, mapping every failure to an exit code."""
    try:
        metrics = read_run_metrics(run_folder)
    except IndexOutOfBoundsError as e:
        log.error(e)
        return None, ExitCode.UNEXPECTED_EXCEPTION
    except MissingRunInfoError as e:
        log.error(e)
        return None, ExitCode.MISSING_RUNINFO_XML
    except MalformedXmlError as e:
        log.error(e)
        return None, ExitCode.MALFORMED_XML
    except BadFormatError as e:
        log.error(e)
        return None, ExitCode.BAD_FORMAT
    except Exception as e:
        log.error(f"Unexpected error reading {run_folder}: {e}")
        return None, ExitCode.UNEXPECTED_EXCEPTION
    if metrics.is_empty():
        log.error("No InterOp files found")
        return None, ExitCode.EMPTY_INTEROP
    return metrics, ExitCode.SUCCESS


def _echo_axes(title: str, x_axis, y_axis) -> None:
    click.echo(f"# Title: {title}")
    click.echo(f"# X: {x_axis.label} [{x_axis.min:g}, {x_axis.max:g}]")
    click.echo(f"# Y: {y_axis.label} [{y_axis.min:g}, {y_axis.max:g}]")


def write_plot_data(data: PlotData) -> None:
    _echo_axes(data.title, data.x_axis, data.y_axis)
    click.echo(data.to_frame().to_csv(sep="\t", index=False, float_format="%.6g"), nl=False)


def write_heatmap(data: HeatmapData) -> None:
    _echo_axes(data.title, data.x_axis, data.y_axis)
    if data.empty:
        return
    click.echo(data.to_frame().to_csv(sep="\t", float_format="%.6g"), nl=False)


run_folder_argument = click.argument("run_folder", type=click.Path(exists=True, file_okay=False, readable=True))
lane_option = click.option("--lane", type=int, default=None, help="Only plot this lane")
surface_option = click.option("--surface", type=int, default=None, help="Only plot this surface (1 top, 2 bottom)")


@click.group()
@click.version_option(__version__, prog_name="savplot")
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages to stderr")
def cli(verbose: bool) -> None:
    """Plot data from Illumina InterOp run metrics."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


@cli.command("by-lane")
@run_folder_argument
@click.option("-m", "--metric", default="Density", show_default=True, help="Tile metric to plot")
@lane_option
@surface_option
@click.option("--read", type=int, default=None, help="Read number for read-specific metrics")
@click.pass_context
def by_lane(
    ctx: click.Context,
    run_folder: str,
    metric: str,
    lane: Optional[int],
    surface: Optional[int],
    read: Optional[int],
) -> None:
    """Candle-stick summary of a tile metric for each lane."""
    try:
        metric_type = parse_metric_type(metric)
    except InvalidMetricTypeError as e:
        log.error(e)
        ctx.exit(int(ExitCode.INVALID_ARGUMENTS))

    metrics, code = load_run_metrics(run_folder)
    if code != ExitCode.SUCCESS:
        ctx.exit(int(code))

    options = FilterOptions(metrics.run_info.flowcell.naming_method, lane=lane, surface=surface, read=read)
    data = PlotData()
    try:
        plot_by_lane(metrics, metric_type, options, data)
    except InvalidFilterOption as e:
        log.error(e)
        ctx.exit(int(ExitCode.INVALID_ARGUMENTS))
    except SavPlotError as e:
        log.error(f"Failed to plot {run_folder}: {e}")
        ctx.exit(int(ExitCode.UNEXPECTED_EXCEPTION))
    write_plot_data(data)


@cli.command("qscore-heatmap")
@run_folder_argument
@lane_option
@surface_option
@click.pass_context
def qscore_heatmap(ctx: click.Context, run_folder: str, lane: Optional[int], surface: Optional[int]) -> None:
    """Q-score heatmap over cycles, in percent of the busiest cell."""
    metrics, code = load_run_metrics(run_folder)
    if code != ExitCode.SUCCESS:
        ctx.exit(int(code))

    options = FilterOptions(metrics.run_info.flowcell.naming_method, lane=lane, surface=surface)
    data = HeatmapData()
    try:
        plot_qscore_heatmap(metrics, options, data)
    except InvalidFilterOption as e:
        log.error(e)
        ctx.exit(int(ExitCode.INVALID_ARGUMENTS))
    except SavPlotError as e:
        log.error(f"Failed to plot {run_folder}: {e}")
        ctx.exit(int(ExitCode.UNEXPECTED_EXCEPTION))
    write_heatmap(data)


def main() -> None:
    """Console entry point; usage errors exit with INVALID_ARGUMENTS."""
    try:
        code = cli.main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(int(ExitCode.INVALID_ARGUMENTS))
    except click.Abort:
        sys.exit(int(ExitCode.UNEXPECTED_EXCEPTION))
    sys.exit(int(code or ExitCode.SUCCESS))


if __name__ == "__main__":
    main()
