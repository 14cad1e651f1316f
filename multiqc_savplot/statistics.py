"""Descriptive statistics for candle-stick plots."""

from typing import Optional, Sequence

import numpy as np

from multiqc_savplot.plot_data import CandleStickPoint

# Tukey fences: values further than 1.5 IQR from the quartiles are outliers
OUTLIER_IQR_FACTOR = 1.5


def quartiles(values: Sequence[float]) -> tuple[float, float, float]:
    """First quartile, median and third quartile with linear interpolation."""
    q1, median, q3 = np.percentile(np.asarray(values, dtype=np.float64), [25, 50, 75])
    return float(q1), float(median), float(q3)


def candle_stick(values: Sequence[float], x: float, outliers: Optional[list[float]] = None) -> CandleStickPoint:
    """
    Reduce a sample to a candle-stick point.

    Whiskers are the extreme values inside the Tukey fences; values outside
    the fences are outliers, stored on the point in sample order and also
    appended to ``outliers`` when a list is given.

    Args:
        values: non-empty sample of finite values
        x: x-coordinate of the point
        outliers: optional list collecting outliers across calls

    Returns:
        Candle-stick point at ``x``
    """
    sample = np.asarray(values, dtype=np.float64)
    if sample.size == 0:
        raise ValueError("Cannot build a candle stick from an empty sample")

    q1, median, q3 = quartiles(sample)
    iqr = q3 - q1
    lower_fence = q1 - OUTLIER_IQR_FACTOR * iqr
    upper_fence = q3 + OUTLIER_IQR_FACTOR * iqr

    inside = (sample >= lower_fence) & (sample <= upper_fence)
    point_outliers = [float(v) for v in sample[~inside]]
    if outliers is not None:
        outliers.extend(point_outliers)

    in_range = sample[inside]
    return CandleStickPoint(
        x=float(x),
        p25=q1,
        p50=median,
        p75=q3,
        lower=float(in_range.min()),
        upper=float(in_range.max()),
        outliers=tuple(point_outliers),
    )
