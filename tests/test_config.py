import dataclasses

import pytest

from kymophase.config import BoundaryMode, PhaseMapConfig
from kymophase.errors import InvalidInputError


def test_defaults():
    cfg = PhaseMapConfig()
    assert cfg.octave_number == 4
    assert cfg.voices_per_octave == 50
    assert cfg.gauss_sigma == 0.5
    assert (cfg.x0, cfg.x1, cfg.sigma0, cfg.sigma1) == (100, 400, 5, 20)
    assert cfg.boundary_mode is BoundaryMode.TRUNCATED
    assert cfg.subtraction_point is None


def test_boundary_mode_accepts_strings():
    assert PhaseMapConfig(boundary_mode="mirrored").boundary_mode is BoundaryMode.MIRRORED


@pytest.mark.parametrize("changes", [
    {"boundary_mode": "wrapped"},
    {"gauss_sigma": 0},
    {"gauss_sigma": -0.5},
    {"x0": 500, "x1": 100},
    {"voices_per_octave": 0},
    {"octave_number": -1},
    {"subtraction_point": -1},
    {"mirror_samples": -1},
    {"wave_count_cutoff": 0},
    {"sigma0": float("inf")},
])
def test_out_of_range_values_fail_fast(changes):
    with pytest.raises(InvalidInputError):
        PhaseMapConfig(**changes)


def test_config_is_frozen():
    cfg = PhaseMapConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.gauss_sigma = 2.0


def test_replace_validates():
    cfg = PhaseMapConfig().replace(x0=10, x1=20)
    assert (cfg.x0, cfg.x1) == (10, 20)
    with pytest.raises(InvalidInputError):
        cfg.replace(x1=5)


def test_schedule_uses_config_values():
    schedule = PhaseMapConfig(x0=0, x1=10, sigma0=0, sigma1=50).schedule()
    assert schedule.voice(5) == pytest.approx(25)
