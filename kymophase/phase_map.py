"""
Wavelet phase maps of kymographs.

The kymograph is a 2D array indexed [t, x]: each column x is a position
along the line of interest, and the signal down a column is assumed to be
periodic. Every column is analysed with a Gabor (Morlet-like) wavelet of
angular frequency 6 whose scale depends on x, giving one instantaneous phase
per valid cell.

Samples below SENTINEL after row smoothing mark "no data" (background past
the end of the organism): a column is only analysed up to its first such
sample, and the cells after it are left at 0.

Example:
    engine = WaveletPhaseEngine(PhaseMapConfig(subtraction_point=0))
    result = engine.compute(kymograph)
    counts = result.wave_counts()
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from .config import BoundaryMode, PhaseMapConfig
from .errors import InvalidInputError
from .tools.gaussian_tools import Gaussian1D

logger = logging.getLogger(__name__)

SENTINEL = 2.0
OMEGA = 6.0
FOURIER_PERIOD = 4 * np.pi / (OMEGA + np.sqrt(2 + OMEGA * OMEGA))

# rows of u evaluated at once per column; bounds the temporary (rows x samples) arrays
_ROW_BLOCK = 256


@dataclass(frozen=True)
class ScaleSchedule:
    """
    Piecewise linear voice number over the column index, converted to a
    wavelet scale:

        voice(x) = sigma0 for x <= x0, sigma1 for x >= x1, linear in between
        scale(x) = 2 ** (octave_number - 1 + voice(x) / voices_per_octave) / FOURIER_PERIOD
    """
    x0: float
    x1: float
    sigma0: float
    sigma1: float
    octave_number: float = 4
    voices_per_octave: float = 50

    def voice(self, x: float) -> float:
        if x <= self.x0:
            return float(self.sigma0)
        if x >= self.x1:
            return float(self.sigma1)
        return self.sigma0 + (x - self.x0) * (self.sigma1 - self.sigma0) / (self.x1 - self.x0)

    def scale(self, x: float) -> float:
        exponent = self.octave_number - 1 + self.voice(x) / self.voices_per_octave
        return 2.0 ** exponent / FOURIER_PERIOD


# ============================
# Wavelet sums
# ============================
def _extended_samples(data: np.ndarray, data_size: int, mirror_samples: int):
    """Valid samples, optionally with reflected virtual samples on both sides."""
    valid = np.asarray(data[:data_size], dtype=float)
    pad = min(int(mirror_samples), data_size)
    if pad == 0:
        return valid, np.arange(data_size, dtype=float)
    # d[-1-i] = d[i], d[n+i] = d[n-1-i]
    extended = np.pad(valid, pad, mode="symmetric")
    return extended, np.arange(-pad, data_size + pad, dtype=float)


def _phases(samples: np.ndarray, positions: np.ndarray, taus: np.ndarray, s: float) -> np.ndarray:
    u = (positions[None, :] - taus[:, None]) / s
    decay = np.exp(-u * u / 2)
    w_real = (np.cos(OMEGA * u) * decay) @ samples
    w_imag = -((np.sin(OMEGA * u) * decay) @ samples)
    phase = np.arctan2(w_imag, w_real)
    # atan2 may return -pi; keep the half-open interval (-pi, pi]
    phase[phase <= -np.pi] = np.pi
    return phase


def column_phases(data, data_size: int, s: float,
                  boundary_mode=BoundaryMode.TRUNCATED,
                  mirror_samples: int = 30) -> np.ndarray:
    """Phase at every t in [0, data_size) of one column."""
    if data_size <= 0:
        return np.zeros(0, dtype=float)
    mirror = mirror_samples if BoundaryMode(boundary_mode) is BoundaryMode.MIRRORED else 0
    samples, positions = _extended_samples(np.asarray(data), data_size, mirror)
    out = np.empty(data_size, dtype=float)
    for start in range(0, data_size, _ROW_BLOCK):
        taus = np.arange(start, min(start + _ROW_BLOCK, data_size), dtype=float)
        out[start:start + taus.size] = _phases(samples, positions, taus, s)
    return out


def gabor_phase(data, data_size: int, s: float, t: int,
                boundary_mode=BoundaryMode.TRUNCATED,
                mirror_samples: int = 30) -> float:
    """Phase of the wavelet coefficient centred on sample `t`."""
    mirror = mirror_samples if BoundaryMode(boundary_mode) is BoundaryMode.MIRRORED else 0
    samples, positions = _extended_samples(np.asarray(data), data_size, mirror)
    return float(_phases(samples, positions, np.array([float(t)]), s)[0])


# ============================
# Profiles and wave counts
# ============================
def unwrap_profile(values) -> np.ndarray:
    """
    Remove jumps between consecutive samples, in multiples of pi.

    Note: the correction unit is pi, not 2*pi, so a genuine half-cycle step
    between neighbours is also folded away. Kept as is for compatibility
    with existing phase-profile results.
    """
    profile = np.array(values, dtype=float)
    for i in range(1, profile.size):
        diff = (profile[i] - profile[i - 1]) / np.pi
        if abs(diff) >= 0.5:
            profile[i] -= np.pi * np.floor(diff + 0.5)
    return profile


def wave_count(profile, cutoff: int = 2) -> float:
    """
    Number of oscillations spanned by an unwrapped profile, ignoring the
    cutoff - 1 most extreme samples at either end of its sorted values.
    """
    values = np.sort(np.asarray(profile, dtype=float))
    n = values.size
    if n <= cutoff:
        return 0.0
    return float((values[n - cutoff] - values[cutoff - 1]) / (2 * np.pi))


def data_size(column) -> int:
    """Index of the first sample below SENTINEL (NaN counts), or the column length."""
    column = np.asarray(column, dtype=float)
    below = np.flatnonzero(~(column >= SENTINEL))
    return int(below[0]) if below.size else int(column.size)


def row_lengths(data_sizes: np.ndarray, height: int) -> np.ndarray:
    """Per row, the number of leading columns whose cell holds data."""
    data_sizes = np.asarray(data_sizes, dtype=int)
    width = data_sizes.size
    if width == 0:
        return np.zeros(height, dtype=int)
    invalid = data_sizes[None, :] <= np.arange(height)[:, None]
    return np.where(invalid.any(axis=1), invalid.argmax(axis=1), width).astype(int)


def phase_profile_map(phase: np.ndarray, data_sizes: np.ndarray,
                      subtraction_point: int) -> np.ndarray:
    """
    Phase differences to column `subtraction_point`, wrapped into [-pi, pi),
    per row up to the row's valid length. Rows whose reference cell holds no
    data stay 0.
    """
    height, width = phase.shape
    if width == 0:
        return np.zeros_like(phase)
    if not 0 <= subtraction_point < width:
        raise InvalidInputError(
            f"subtraction point {subtraction_point} outside [0, {width})"
        )
    lengths = row_lengths(data_sizes, height)
    out = np.zeros_like(phase)
    for t in range(height):
        if data_sizes[subtraction_point] <= t:
            continue
        length = lengths[t]
        reference = phase[t, subtraction_point]
        wrapped = np.mod(phase[t, :length] - reference + np.pi, 2 * np.pi) - np.pi
        # np.mod can round up to 2*pi itself
        wrapped[wrapped >= np.pi] -= 2 * np.pi
        out[t, :length] = wrapped
    return out


# ============================
# Results
# ============================
@dataclass(frozen=True)
class PhaseMapResult:
    phase: np.ndarray                   # (height, width), 0 where no data
    data_sizes: np.ndarray              # valid samples per column
    row_lengths: np.ndarray             # leading valid columns per row
    config: PhaseMapConfig
    profile_map: Optional[np.ndarray] = None

    @property
    def shape(self):
        return self.phase.shape

    @property
    def valid_mask(self) -> np.ndarray:
        height = self.phase.shape[0]
        return np.arange(height)[:, None] < self.data_sizes[None, :]

    def profile(self, t: int) -> np.ndarray:
        """
        Unwrapped profile of row `t`, taken from the phase-difference map when
        one was computed, from the raw phase map otherwise.
        """
        source = self.profile_map if self.profile_map is not None else self.phase
        return unwrap_profile(source[t, :self.row_lengths[t]])

    def profiles(self) -> List[np.ndarray]:
        return [self.profile(t) for t in range(self.phase.shape[0])]

    def wave_counts(self, cutoff: Optional[int] = None) -> np.ndarray:
        if cutoff is None:
            cutoff = self.config.wave_count_cutoff
        return np.array([wave_count(p, cutoff) for p in self.profiles()], dtype=float)

    def wave_count_frame(self, cutoff: Optional[int] = None) -> pd.DataFrame:
        return pd.DataFrame({
            "row": np.arange(self.phase.shape[0]),
            "length": self.row_lengths,
            "wave_count": self.wave_counts(cutoff),
        })


# ============================
# Engine
# ============================
def as_grid(grid) -> np.ndarray:
    """
    Float copy of a 2D intensity grid. Ragged rows are right-padded with 0,
    which reads as "no data".
    """
    if isinstance(grid, np.ndarray):
        array = np.array(grid, dtype=float)
    else:
        rows = [np.asarray(row, dtype=float).ravel() for row in grid]
        width = max((row.size for row in rows), default=0)
        array = np.zeros((len(rows), width), dtype=float)
        for t, row in enumerate(rows):
            array[t, :row.size] = row
    if array.ndim == 1:
        array = array[None, :]
    if array.ndim != 2:
        raise InvalidInputError(f"expected a 2D grid, got shape {array.shape}")
    return array


class WaveletPhaseEngine:
    """
    Computes phase maps for one configuration.

    workers > 1 spreads the columns over a thread pool; each column only
    reads the shared smoothed grid and writes its own output column.
    """

    def __init__(self, config: Optional[PhaseMapConfig] = None, workers: int = 1):
        self.config = config if config is not None else PhaseMapConfig()
        self.workers = max(1, int(workers))
        self.schedule = self.config.schedule()
        self.gauss = Gaussian1D(self.config.gauss_sigma)

    def smooth_rows(self, pixels: np.ndarray) -> np.ndarray:
        """Gaussian pre-filter along every row, in place."""
        if pixels.shape[1] < self.gauss.size:
            logger.debug("rows of %d samples are shorter than the kernel; not smoothed",
                         pixels.shape[1])
            return pixels
        for t in range(pixels.shape[0]):
            self.gauss.smooth_into(pixels[t])
        return pixels

    def _column(self, pixels: np.ndarray, x: int, size: int, out: np.ndarray):
        if size == 0:
            return
        data = pixels[:size, x].copy()
        if self.config.smooth_columns and size >= self.gauss.size:
            self.gauss.smooth_into(data)
        out[:size, x] = column_phases(
            data, size, self.schedule.scale(x),
            boundary_mode=self.config.boundary_mode,
            mirror_samples=self.config.mirror_samples,
        )

    def compute(self, grid) -> PhaseMapResult:
        cfg = self.config
        pixels = self.smooth_rows(as_grid(grid))
        height, width = pixels.shape

        # measured after the row pass: a background cell next to data can
        # rise above SENTINEL, and NaN spreads to its neighbours
        sizes = np.array([data_size(pixels[:, x]) for x in range(width)], dtype=int)
        phase = np.zeros((height, width), dtype=float)

        logger.debug("phase map %dx%d, mode=%s, workers=%d",
                     width, height, cfg.boundary_mode.value, self.workers)
        if self.workers > 1 and width > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                list(executor.map(lambda x: self._column(pixels, x, sizes[x], phase), range(width)))
        else:
            for x in range(width):
                self._column(pixels, x, sizes[x], phase)

        empty = int(np.count_nonzero(sizes == 0))
        if empty:
            logger.debug("%d of %d columns hold no data", empty, width)

        profile_map = None
        if cfg.subtraction_point is not None:
            profile_map = phase_profile_map(phase, sizes, cfg.subtraction_point)

        return PhaseMapResult(
            phase=phase,
            data_sizes=sizes,
            row_lengths=row_lengths(sizes, height),
            config=cfg,
            profile_map=profile_map,
        )


def compute_phase_map(grid, config: Optional[PhaseMapConfig] = None, workers: int = 1) -> PhaseMapResult:
    """One-shot helper around WaveletPhaseEngine."""
    return WaveletPhaseEngine(config, workers=workers).compute(grid)
