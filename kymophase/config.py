from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import InvalidInputError


class BoundaryMode(str, Enum):
    """How the wavelet sum treats the ends of a column."""
    TRUNCATED = "truncated"   # sum over the valid samples only
    MIRRORED = "mirrored"     # plus reflected virtual samples on both sides


# ============================
# Config
# ============================
@dataclass(frozen=True)
class PhaseMapConfig:
    """
    Wavelet phase map parameters.

    Units:
      - x0, x1, subtraction_point: column index (position along the line)
      - sigma0, sigma1: voice numbers
      - gauss_sigma: samples
    """

    # ---- scale schedule ----
    octave_number: float = 4
    voices_per_octave: float = 50
    x0: float = 100
    x1: float = 400
    sigma0: float = 5
    sigma1: float = 20

    # ---- pre-smoothing ----
    gauss_sigma: float = 0.5
    smooth_columns: bool = True           # second pass along each column's valid prefix

    # ---- wavelet sum ----
    boundary_mode: BoundaryMode = BoundaryMode.TRUNCATED
    mirror_samples: int = 30              # virtual samples per side in mirrored mode

    # ---- derived views ----
    subtraction_point: Optional[int] = None   # reference column; None disables the profile view
    wave_count_cutoff: int = 2

    def __post_init__(self):
        try:
            mode = BoundaryMode(self.boundary_mode)
        except ValueError:
            raise InvalidInputError(f"unknown boundary mode {self.boundary_mode!r}") from None
        object.__setattr__(self, "boundary_mode", mode)

        for name in ("octave_number", "voices_per_octave", "x0", "x1", "sigma0", "sigma1", "gauss_sigma"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidInputError(f"{name} must be finite")
        if self.voices_per_octave <= 0:
            raise InvalidInputError("voices_per_octave must be > 0")
        if self.octave_number <= 0:
            raise InvalidInputError("octave_number must be > 0")
        if self.gauss_sigma <= 0:
            raise InvalidInputError("gauss_sigma must be > 0")
        if self.x0 > self.x1:
            raise InvalidInputError(f"x0 ({self.x0}) must not exceed x1 ({self.x1})")
        if self.mirror_samples < 0:
            raise InvalidInputError("mirror_samples must be >= 0")
        if self.subtraction_point is not None and self.subtraction_point < 0:
            raise InvalidInputError("subtraction_point must be >= 0")
        if self.wave_count_cutoff < 1:
            raise InvalidInputError("wave_count_cutoff must be >= 1")

    def replace(self, **changes) -> "PhaseMapConfig":
        return dataclasses.replace(self, **changes)

    def schedule(self):
        from .phase_map import ScaleSchedule

        return ScaleSchedule(
            x0=self.x0,
            x1=self.x1,
            sigma0=self.sigma0,
            sigma1=self.sigma1,
            octave_number=self.octave_number,
            voices_per_octave=self.voices_per_octave,
        )
