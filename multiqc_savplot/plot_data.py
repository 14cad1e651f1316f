"""
Plot-ready data containers.

``PlotData`` holds one or more series of points together with axis ranges,
labels and a title. ``HeatmapData`` holds a dense cycle by Q-score grid.
Both are created empty by the caller and filled by a single engine call.
"""

import copy
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

import numpy as np
import pandas as pd

from multiqc_savplot.exceptions import IndexOutOfBoundsError


@dataclass
class Axis:
    min: float = 0.0
    max: float = 0.0
    label: str = ""

    def set_range(self, vmin: float, vmax: float) -> None:
        self.min = float(vmin)
        self.max = float(vmax)


@dataclass(frozen=True)
class PlotPoint:
    x: float
    y: float

    @property
    def min_value(self) -> float:
        return self.y

    @property
    def max_value(self) -> float:
        return self.y


@dataclass(frozen=True)
class CandleStickPoint:
    """Five-number summary of a sample at ``x``, plus its outliers."""

    x: float
    p25: float
    p50: float
    p75: float
    lower: float
    upper: float
    outliers: tuple[float, ...] = ()

    @property
    def y(self) -> float:
        return self.p50

    @property
    def min_value(self) -> float:
        return min((self.lower, *self.outliers))

    @property
    def max_value(self) -> float:
        return max((self.upper, *self.outliers))


Point = Union[PlotPoint, CandleStickPoint]


@dataclass
class Series:
    title: str = ""
    color: str = ""
    points: list = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point:
        return self.points[index]


class PlotData:
    """Series of points with axes, labels and a title."""

    def __init__(self) -> None:
        self.series: list[Series] = []
        self.x_axis = Axis()
        self.y_axis = Axis()
        self.title = ""

    def assign(self, count: int, series: Series) -> None:
        """Replace all series with ``count`` copies of ``series``."""
        self.series = [copy.deepcopy(series) for _ in range(count)]

    def append(self, series: Series) -> None:
        self.series.append(series)

    def __len__(self) -> int:
        return len(self.series)

    def __iter__(self) -> Iterator[Series]:
        return iter(self.series)

    def __getitem__(self, index: int) -> Series:
        return self.series[index]

    def set_xrange(self, vmin: float, vmax: float) -> None:
        self.x_axis.set_range(vmin, vmax)

    def set_yrange(self, vmin: float, vmax: float) -> None:
        self.y_axis.set_range(vmin, vmax)

    def set_xlabel(self, label: str) -> None:
        self.x_axis.label = label

    def set_ylabel(self, label: str) -> None:
        self.y_axis.label = label

    def set_title(self, title: str) -> None:
        self.title = title

    def clear(self) -> None:
        self.series = []
        self.x_axis = Axis()
        self.y_axis = Axis()
        self.title = ""

    def to_frame(self) -> pd.DataFrame:
        """One row per point; candle-stick columns are NaN for plain points."""
        rows = []
        for series in self.series:
            for point in series:
                row = {"series": series.title, "color": series.color, "x": point.x, "y": point.y}
                if isinstance(point, CandleStickPoint):
                    row.update(
                        {
                            "lower": point.lower,
                            "p25": point.p25,
                            "p50": point.p50,
                            "p75": point.p75,
                            "upper": point.upper,
                            "outliers": ",".join(f"{v:g}" for v in point.outliers),
                        }
                    )
                rows.append(row)
        return pd.DataFrame(rows, columns=["series", "color", "x", "y", "lower", "p25", "p50", "p75", "upper", "outliers"])


def auto_scale(data: PlotData, apply_padding: bool = True, pad_factor: float = 1.1) -> None:
    """
    Set both axis ranges to cover every point of every series.

    With padding, the y-span is multiplied by ``pad_factor`` around the
    mid-point of the extremes. Without points both ranges become [0, 0].
    """
    points = [p for series in data for p in series]
    if not points:
        data.set_xrange(0, 0)
        data.set_yrange(0, 0)
        return

    xmin = min(p.x for p in points)
    xmax = max(p.x for p in points)
    ymin = min(p.min_value for p in points)
    ymax = max(p.max_value for p in points)
    data.set_xrange(xmin, xmax)

    if apply_padding:
        center = (ymin + ymax) / 2.0
        half_span = (ymax - ymin) * pad_factor / 2.0
        ymin, ymax = center - half_span, center + half_span
    data.set_yrange(ymin, ymax)


class HeatmapData:
    """Dense row-major grid; rows are cycles and columns are Q-scores."""

    def __init__(self, rows: int = 0, columns: int = 0) -> None:
        self.data = np.zeros((rows, columns), dtype=np.float64)
        self.x_axis = Axis()
        self.y_axis = Axis()
        self.title = ""

    @property
    def row_count(self) -> int:
        return self.data.shape[0]

    @property
    def column_count(self) -> int:
        return self.data.shape[1]

    @property
    def empty(self) -> bool:
        return self.data.size == 0

    def resize(self, rows: int, columns: int) -> None:
        """Reallocate a zero-filled ``rows`` x ``columns`` grid."""
        self.data = np.zeros((rows, columns), dtype=np.float64)

    def clear(self) -> None:
        self.resize(0, 0)
        self.x_axis = Axis()
        self.y_axis = Axis()
        self.title = ""

    def _check_index(self, index: tuple[int, int]) -> None:
        row, col = index
        if not (0 <= row < self.row_count and 0 <= col < self.column_count):
            raise IndexOutOfBoundsError(
                f"Heatmap index ({row}, {col}) out of range ({self.row_count}, {self.column_count})"
            )

    def __getitem__(self, index: tuple[int, int]) -> float:
        self._check_index(index)
        return float(self.data[index])

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        self._check_index(index)
        self.data[index] = value

    def max_value(self) -> float:
        return float(self.data.max()) if self.data.size else 0.0

    def set_xrange(self, vmin: float, vmax: float) -> None:
        self.x_axis.set_range(vmin, vmax)

    def set_yrange(self, vmin: float, vmax: float) -> None:
        self.y_axis.set_range(vmin, vmax)

    def set_xlabel(self, label: str) -> None:
        self.x_axis.label = label

    def set_ylabel(self, label: str) -> None:
        self.y_axis.label = label

    def set_title(self, title: str) -> None:
        self.title = title

    def to_frame(self) -> pd.DataFrame:
        """Grid as a DataFrame indexed by cycle with one column per Q-score."""
        return pd.DataFrame(
            self.data,
            index=pd.Index(range(1, self.row_count + 1), name="Cycle"),
            columns=pd.Index(range(1, self.column_count + 1), name="Q Score"),
        )


def join_title(*parts: Optional[str]) -> str:
    """Join the non-empty title components with single spaces."""
    return " ".join(p for p in parts if p)
