"""
Two independent extrema detectors for 1D profiles.

- find_minima / find_maxima: tolerance-interval scanner. An index is a
  minimum when no smaller sample shows up before the neighbours climb more
  than tolerance * (max - min) above it.
- find_slope_extrema: slope-window scanner. An index is a maximum (minimum)
  when the regressed slope rises (falls) by at least `minimal_slope` on its
  left and falls (rises) on its right.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pandas as pd
from scipy.linalg import LinAlgError, solve

from ..errors import DegenerateFitError
from .regression_tools import LinearRegression

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extrema:
    """Positions (strictly increasing) and the intensities found there."""
    x: np.ndarray
    intensities: np.ndarray

    def __len__(self):
        return int(self.x.size)

    def __iter__(self):
        return iter(zip(self.x.tolist(), self.intensities.tolist()))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"x": self.x, "intensity": self.intensities})

    @classmethod
    def empty(cls) -> "Extrema":
        return cls(np.zeros(0, dtype=float), np.zeros(0, dtype=float))


# ============================
# Tolerance interval
# ============================
def find_minima(series, tolerance: float, refine: bool = False) -> Extrema:
    """
    Local minima of `series`.

    tolerance: fraction of the global intensity range. Neighbours up to
               series[i] + tolerance * (max - min) belong to the "stable"
               interval around a candidate.
    refine:    report the vertex of a parabola fitted to the stable interval
               (sub-sample position) instead of the index itself.
    """
    series = np.asarray(series, dtype=float)
    n = series.size
    if n < 3:
        return Extrema.empty()

    span = float(series.max() - series.min())
    xs: List[float] = []
    values: List[float] = []
    for i in range(1, n - 1):
        interval = _minimum_interval(series, i, tolerance * span)
        if interval is None:
            continue
        if refine:
            x, value = _fitted_minimum(series, i, *interval)
        else:
            x, value = float(i), float(series[i])
        # tied samples share one stable interval, hence one fitted vertex
        if xs and x <= xs[-1]:
            continue
        xs.append(x)
        values.append(value)

    return Extrema(np.asarray(xs, dtype=float), np.asarray(values, dtype=float))


def find_maxima(series, tolerance: float, refine: bool = False) -> Extrema:
    """Local maxima: minima of the negated series, intensities negated back."""
    negated = -np.asarray(series, dtype=float)
    found = find_minima(negated, tolerance, refine=refine)
    return Extrema(found.x, -found.intensities)


def _minimum_interval(series: np.ndarray, index: int, threshold: float):
    """
    Return (left, right) bounds of the stable interval around `index`, or
    None if a smaller sample is reached before leaving the interval.
    """
    center = series[index]
    max_intensity = center + threshold

    left = index
    while left > 0:
        neighbour = series[left - 1]
        if neighbour < center:
            return None
        if neighbour > max_intensity:
            break
        left -= 1

    right = index
    last = series.size - 1
    while right < last:
        neighbour = series[right + 1]
        if neighbour < center:
            return None
        if neighbour > max_intensity:
            break
        right += 1

    return left, right


def _fitted_minimum(series: np.ndarray, index: int, left: int, right: int) -> Tuple[float, float]:
    if left + 1 == right:
        if series[left] > series[right]:
            left = right
        else:
            right = left
    if left == right:
        return float(left), float(series[left])

    # least squares on {1, x, x^2}, normal equations in mean moments
    x = np.arange(left, right + 1, dtype=float)
    y = series[left:right + 1]
    moments = [np.mean(x ** k) for k in range(5)]
    matrix = np.array([
        [moments[4], moments[3], moments[2]],
        [moments[3], moments[2], moments[1]],
        [moments[2], moments[1], moments[0]],
    ])
    rhs = np.array([np.mean(y * x * x), np.mean(y * x), np.mean(y)])
    try:
        a, b, c = solve(matrix, rhs)
    except LinAlgError:
        logger.debug("parabola fit singular on [%d, %d]", left, right)
        a = 0.0
    if not a > 0:
        # no vertex (flat interval): report the interval centre
        return (left + right) / 2.0, float(y.min())

    vertex = -b / (2 * a)
    return float(vertex), float(a * vertex * vertex + b * vertex + c)


# ============================
# Slope window
# ============================
def find_slope_extrema(series, window: int, minimal_slope: float,
                       find_maxima: bool = True) -> Extrema:
    """
    Extrema by regressed slopes over `window` samples on either side.

    Candidates closer than 4 * window to the previously accepted one are
    merged, keeping the more extreme sample.
    """
    series = np.asarray(series, dtype=float)
    n = series.size
    window = int(window)
    if window < 1 or n < 2 * window + 1:
        return Extrema.empty()

    factor = 1.0 if find_maxima else -1.0
    positions: List[int] = []
    for i in range(window, n - window):
        try:
            left_slope = _slope(series, i - window, i)
            right_slope = _slope(series, i, i + window)
        except DegenerateFitError:
            logger.debug("degenerate slope window at %d, skipped", i)
            continue
        if not (left_slope * factor >= minimal_slope and right_slope * factor < -minimal_slope):
            continue

        if positions and i - positions[-1] < 4 * window:
            if series[positions[-1]] * factor < series[i] * factor:
                positions[-1] = i
        else:
            positions.append(i)

    x = np.asarray(positions, dtype=int)
    return Extrema(x.astype(float), series[x] if x.size else np.zeros(0, dtype=float))


def _slope(series: np.ndarray, start: int, end: int) -> float:
    regression = LinearRegression()
    for i in range(max(start, 0), min(end, series.size - 1) + 1):
        regression.add(i, series[i])
    return regression.a
