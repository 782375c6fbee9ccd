"""
Small series helpers shared by the analyses.
"""

import numpy as np

from ..errors import InvalidInputError
from .regression_tools import LinearRegression, RunningStats


def frange(start, end, step=1.0):
    """
    Return start, start+step, ... up to and including `end`.
    An empty array is returned when end < start.
    """
    if step <= 0:
        raise InvalidInputError("step must be > 0")
    if end < start:
        return np.zeros(0, dtype=float)
    count = int(np.floor((end - start) / step)) + 1
    return start + step * np.arange(count, dtype=float)


def sub_series(series, start, end=None):
    series = np.asarray(series, dtype=float)
    if end is None:
        end = series.size
    return series[start:end].copy()


def trim_outliers(series, tolerance):
    """
    Drop leading and trailing samples lying farther than
    tolerance * std from the mean. Interior samples are never removed.
    """
    series = np.asarray(series, dtype=float)
    if series.size == 0:
        return series
    stats = RunningStats(series)
    limit = tolerance * stats.std
    mean = stats.mean

    start = 0
    while start < series.size - 1 and abs(series[start] - mean) > limit:
        start += 1
    end = series.size
    while end > 1 and abs(series[end - 1] - mean) > limit:
        end -= 1
    if start == 0 and end == series.size:
        return series
    return sub_series(series, start, max(start, end))


def log_series(series):
    return np.log(np.asarray(series, dtype=float))


def divide(series, divisor):
    """Pointwise division; `divisor` may be a scalar or a same-length series."""
    return np.asarray(series, dtype=float) / np.asarray(divisor, dtype=float)


def compensate_for_decay(series):
    """Subtract the least-squares line fitted against the sample index."""
    series = np.asarray(series, dtype=float)
    x = frange(0, series.size - 1)
    regression = LinearRegression(x, series)
    return series - regression.predict(x)
