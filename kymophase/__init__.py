"""Wavelet phase analysis of kymographs."""

__version__ = "1.0.0"

from .errors import InvalidInputError, DegenerateFitError
from .config import BoundaryMode, PhaseMapConfig
from .phase_map import (
    FOURIER_PERIOD,
    SENTINEL,
    ScaleSchedule,
    PhaseMapResult,
    WaveletPhaseEngine,
    compute_phase_map,
    gabor_phase,
    column_phases,
    phase_profile_map,
    unwrap_profile,
    wave_count,
)

__all__ = [
    "InvalidInputError",
    "DegenerateFitError",
    "BoundaryMode",
    "PhaseMapConfig",
    "FOURIER_PERIOD",
    "SENTINEL",
    "ScaleSchedule",
    "PhaseMapResult",
    "WaveletPhaseEngine",
    "compute_phase_map",
    "gabor_phase",
    "column_phases",
    "phase_profile_map",
    "unwrap_profile",
    "wave_count",
]
