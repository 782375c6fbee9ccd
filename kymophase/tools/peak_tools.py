"""
Peak bookkeeping for a stack of per-frame intensity profiles.

A "peak" here is an integer sample position in one frame's profile. Peaks of
a frame are kept as a sorted list; the helpers below insert, move and snap
them the way the interactive peak counter does, minus the interaction.
"""

import bisect
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .extrema_tools import find_slope_extrema

logger = logging.getLogger(__name__)


def snap_peak(profile, x: int, max_speed: int = 10) -> int:
    """
    Move `x` to the lowest sample within `max_speed` samples on either side.
    Ties keep the position found first (left side, closest first).
    """
    profile = np.asarray(profile, dtype=float)
    center = int(x)
    best = center
    if not 0 <= center < profile.size:
        return best
    for i in range(max_speed):
        if center - i < 0:
            break
        if profile[best] > profile[center - i]:
            best = center - i
    for i in range(max_speed):
        if center + i >= profile.size:
            break
        if profile[best] > profile[center + i]:
            best = center + i
    return best


def snap_peaks(profile, peaks: Sequence[int], max_speed: int = 10) -> List[int]:
    """Snap every peak of a neighbouring frame onto `profile`."""
    snapped = []
    length = len(profile)
    for peak in peaks:
        peak = snap_peak(profile, peak, max_speed)
        if 0 <= peak < length:
            snapped.append(peak)
    return snapped


def peak_position(peaks: Sequence[int], x: int) -> int:
    """
    Index of `x` in the sorted `peaks`, or -1-insert where `insert` is the
    position that keeps the list sorted.
    """
    index = bisect.bisect_left(peaks, x)
    if index < len(peaks) and peaks[index] == x:
        return index
    return -1 - index


def add_peak(peaks: List[int], x: int, length: int) -> int:
    """Insert `x` (if new and inside [0, length)); returns its index or -1."""
    if x < 0 or x >= length:
        return -1
    index = peak_position(peaks, x)
    if index >= 0:
        return index
    index = -1 - index
    peaks.insert(index, x)
    return index


def move_peak(peaks: List[int], index: int, x: int) -> int:
    """Move peaks[index] to `x`, shifting neighbours so the list stays sorted."""
    while index > 0 and peaks[index - 1] > x:
        peaks[index] = peaks[index - 1]
        index -= 1
    while index + 1 < len(peaks) and peaks[index + 1] < x:
        peaks[index] = peaks[index + 1]
        index += 1
    peaks[index] = x
    return index


def peak_counts(all_peaks: Sequence[Optional[Sequence[int]]]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Peaks per frame and the running maximum of those counts (waves do not
    disappear once formed, so the regularized curve never decreases).
    """
    counts = np.array([len(p) if p is not None else 0 for p in all_peaks], dtype=float)
    if counts.size == 0:
        return counts, counts.copy()
    return counts, np.maximum.accumulate(counts)


def default_minimal_slope(profiles: Sequence[Optional[Sequence[float]]]) -> float:
    """Intensity range of the whole stack divided by its longest profile."""
    present = [np.asarray(p, dtype=float) for p in profiles if p is not None and len(p)]
    if not present:
        return 0.0
    longest = max(p.size for p in present)
    low = min(float(p.min()) for p in present)
    high = max(float(p.max()) for p in present)
    return (high - low) / longest


def initialize_peaks(profiles: Sequence[Optional[Sequence[float]]],
                     window: int = 10,
                     minimal_slope: Optional[float] = None) -> List[List[int]]:
    """Detect the troughs of every profile with the slope-window scanner."""
    if minimal_slope is None:
        minimal_slope = default_minimal_slope(profiles)
    result = []
    for frame, profile in enumerate(profiles):
        if profile is None:
            result.append([])
            continue
        found = find_slope_extrema(profile, window, minimal_slope, find_maxima=False)
        result.append([int(x) for x in found.x])
        logger.debug("frame %d: %d peaks", frame, len(found))
    return result
