"""Shared test fixtures for MultiQC SAVPlot."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from multiqc_savplot.constants import TileNaming
from multiqc_savplot.model import (
    Flowcell,
    MetricSet,
    QMetric,
    QMetricSet,
    QScoreBin,
    ReadInfo,
    ReadMetric,
    RunInfo,
    RunMetrics,
    TileMetric,
)

RUN_INFO_XML = """<?xml version="1.0"?>
<RunInfo Version="2">
  <Run Id="160101_M00001_0001_000000000-FC123" Number="1">
    <Flowcell>FC123</Flowcell>
    <Instrument>M00001</Instrument>
    <Date>160101</Date>
    <Reads>
      <Read Number="1" NumCycles="151" IsIndexedRead="N" />
      <Read Number="2" NumCycles="8" IsIndexedRead="Y" />
      <Read Number="3" NumCycles="151" IsIndexedRead="N" />
    </Reads>
    <FlowcellLayout LaneCount="2" SurfaceCount="2" SwathCount="1" TileCount="3">
      <TileSet TileNamingConvention="FourDigit" />
    </FlowcellLayout>
  </Run>
</RunInfo>
"""

# Lane -> (tile, density, density PF, cluster count, cluster count PF, phasing)
TILES = {
    1: [
        (1101, 100.0, 90.0, 1000.0, 900.0, 0.1),
        (1102, 110.0, 100.0, 1100.0, 1000.0, 0.2),
        (2101, 120.0, 110.0, 1200.0, 1100.0, 0.3),
    ],
    2: [
        (1101, 200.0, 190.0, 2000.0, 1800.0, 0.7),
        (1102, 210.0, 200.0, 2100.0, 1900.0, 0.8),
        (2101, 220.0, 210.0, 2200.0, 2000.0, 0.9),
    ],
}

BINS = [QScoreBin(1, 10, 5), QScoreBin(11, 20, 15), QScoreBin(21, 30, 25)]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def run_info() -> RunInfo:
    return RunInfo(
        name="160101_M00001_0001_000000000-FC123",
        flowcell=Flowcell(
            barcode="FC123",
            lane_count=2,
            surface_count=2,
            tile_count=3,
            naming_method=TileNaming.FourDigit,
        ),
        reads=(ReadInfo(1, 151), ReadInfo(2, 8, is_index=True), ReadInfo(3, 151)),
    )


@pytest.fixture
def tile_metrics() -> MetricSet:
    """Two lanes of three tiles each."""
    records = []
    for lane, tiles in TILES.items():
        for tile, density, density_pf, count, count_pf, phasing in tiles:
            records.append(
                TileMetric(
                    lane=lane,
                    tile=tile,
                    cluster_density=density,
                    cluster_density_pf=density_pf,
                    cluster_count=count,
                    cluster_count_pf=count_pf,
                    reads=(ReadMetric(read=1, percent_aligned=99.0, percent_phasing=phasing, percent_prephasing=phasing / 2),),
                )
            )
    return MetricSet(records)


@pytest.fixture
def compressed_q_metrics() -> QMetricSet:
    """One tile, two cycles, three bins."""
    return QMetricSet(
        [
            QMetric(lane=1, tile=1101, cycle=1, histogram=(3, 1, 0)),
            QMetric(lane=1, tile=1101, cycle=2, histogram=(0, 2, 1)),
        ],
        bins=BINS,
    )


@pytest.fixture
def run_metrics(run_info: RunInfo, tile_metrics: MetricSet, compressed_q_metrics: QMetricSet) -> RunMetrics:
    return RunMetrics(run_info=run_info, tile_metric_set=tile_metrics, q_metric_set=compressed_q_metrics)


@pytest.fixture
def run_folder(tmp_path: Path) -> Path:
    """Run folder with RunInfo.xml and an (empty) InterOp directory."""
    (tmp_path / "RunInfo.xml").write_text(RUN_INFO_XML)
    (tmp_path / "InterOp").mkdir()
    return tmp_path
