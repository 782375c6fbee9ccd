"""
Running statistics and an incremental least-squares line fit.

Both accumulate sufficient statistics in O(1) per sample, so they can be fed
point by point (e.g. while sliding a window over a profile) without keeping
the samples around.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from ..errors import DegenerateFitError


class RunningStats:
    """Mean and population variance from running sums."""

    def __init__(self, values: Optional[Sequence[float]] = None):
        self.reset()
        if values is not None:
            for value in values:
                self.add(value)

    def reset(self):
        self._sum = 0.0
        self._sum2 = 0.0
        self._count = 0

    def add(self, value: float):
        value = float(value)
        self._count += 1
        self._sum += value
        self._sum2 += value * value

    @property
    def count(self) -> int:
        return self._count

    @property
    def mean(self) -> float:
        if self._count == 0:
            return float("nan")
        return self._sum / self._count

    @property
    def variance(self) -> float:
        if self._count == 0:
            return float("nan")
        var = (self._sum2 - self._sum * self._sum / self._count) / self._count
        # rounding can push a zero variance slightly negative
        return max(var, 0.0)

    @property
    def std(self) -> float:
        return float(np.sqrt(self.variance))


class LinearRegression:
    """
    Least-squares fit of y = a*x + b.

    Points are accumulated with `add`; the coefficients are solved lazily
    from the 2x2 normal equations the first time they are needed after a
    change.
    """

    def __init__(self, x: Optional[Sequence[float]] = None,
                 y: Optional[Sequence[float]] = None):
        self.reset()
        if x is not None and y is not None:
            for xi, yi in zip(x, y):
                self.add(xi, yi)

    def reset(self):
        self.sx = 0.0
        self.sxx = 0.0
        self.sy = 0.0
        self.sxy = 0.0
        self.count = 0
        self._fit: Optional[Tuple[float, float]] = None

    def add(self, x: float, y: float):
        x = float(x)
        y = float(y)
        self.sx += x
        self.sxx += x * x
        self.sy += y
        self.sxy += x * y
        self.count += 1
        self._fit = None

    def fit(self) -> Tuple[float, float]:
        """
        Return (a, b).

        Raises DegenerateFitError when fewer than two points were added or
        all x values coincide.
        """
        if self._fit is None:
            n = self.count
            det = n * self.sxx - self.sx * self.sx
            # n*sxx - sx^2 is n^2 * var(x); compare against the scale of sxx
            if n < 2 or det <= np.finfo(float).eps * n * self.sxx:
                raise DegenerateFitError(
                    f"singular normal equations (n={n}, det={det!r})"
                )
            a = (n * self.sxy - self.sx * self.sy) / det
            b = (self.sxx * self.sy - self.sx * self.sxy) / det
            self._fit = (a, b)
        return self._fit

    @property
    def a(self) -> float:
        return self.fit()[0]

    @property
    def b(self) -> float:
        return self.fit()[1]

    def predict(self, x):
        """Evaluate the line at a scalar or an array of x values."""
        a, b = self.fit()
        if np.ndim(x) == 0:
            return a * float(x) + b
        return a * np.asarray(x, dtype=float) + b

    def distance_to(self, x, y):
        return np.asarray(y, dtype=float) - self.predict(x)

    def filter_outliers(self, x, y, tolerance: float):
        """
        Drop pairs whose residual exceeds tolerance times the mean absolute
        residual. Returns (x', y') with the kept pairs in their original order.
        """
        n = min(len(x), len(y))
        x = np.asarray(x, dtype=float)[:n]
        y = np.asarray(y, dtype=float)[:n]
        if n == 0:
            return x, y
        residuals = np.abs(self.distance_to(x, y))
        limit = tolerance * RunningStats(residuals).mean
        keep = residuals <= limit
        return x[keep], y[keep]
