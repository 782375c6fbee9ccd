"""
Combining phase profiles from several kymographs of the same process.

A stack is one profile per time point (e.g. PhaseMapResult.profiles()).
Stacks and the profiles in them may differ in length.
"""

import logging
from typing import List, Sequence

import numpy as np

logger = logging.getLogger(__name__)


def median_profile(profiles: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Pointwise median of profiles of unequal length.

    The result is as long as the longest profile; sample i is the median of
    the profiles that reach i (mean of the two middle values for an even
    count).
    """
    profiles = [np.asarray(p, dtype=float).ravel() for p in profiles]
    length = max((p.size for p in profiles), default=0)
    if length == 0:
        return np.zeros(0, dtype=float)

    padded = np.full((len(profiles), length), np.nan)
    for row, profile in zip(padded, profiles):
        row[:profile.size] = profile
    # every column holds at least the longest profile
    return np.nanmedian(padded, axis=0)


def median_profiles(stacks: Sequence[Sequence[Sequence[float]]]) -> List[np.ndarray]:
    """Median profile per time point across stacks; shorter stacks drop out."""
    stacks = [list(stack) for stack in stacks]
    height = max((len(stack) for stack in stacks), default=0)
    logger.debug("median of %d stacks over %d time points", len(stacks), height)
    return [
        median_profile([stack[t] for stack in stacks if t < len(stack)])
        for t in range(height)
    ]
