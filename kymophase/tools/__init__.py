"""Numeric helper tools for kymophase."""

from .range_tools import frange, sub_series, trim_outliers, log_series, divide, compensate_for_decay
from .regression_tools import LinearRegression, RunningStats
from .gaussian_tools import Gaussian1D
from .fft_tools import fft, ifft, conjugate, multiply, scale, real_spectrum
from .extrema_tools import Extrema, find_minima, find_maxima, find_slope_extrema
from .profile_tools import median_profile, median_profiles
from .peak_tools import (
    snap_peak,
    snap_peaks,
    peak_position,
    add_peak,
    move_peak,
    peak_counts,
    default_minimal_slope,
    initialize_peaks,
)

__all__ = [
    "frange",
    "sub_series",
    "trim_outliers",
    "log_series",
    "divide",
    "compensate_for_decay",
    "LinearRegression",
    "RunningStats",
    "Gaussian1D",
    "fft",
    "ifft",
    "conjugate",
    "multiply",
    "scale",
    "real_spectrum",
    "Extrema",
    "find_minima",
    "find_maxima",
    "find_slope_extrema",
    "snap_peak",
    "snap_peaks",
    "peak_position",
    "add_peak",
    "move_peak",
    "peak_counts",
    "default_minimal_slope",
    "initialize_peaks",
    "median_profile",
    "median_profiles",
]
