import numpy as np

from kymophase.tools.peak_tools import (
    add_peak,
    default_minimal_slope,
    initialize_peaks,
    move_peak,
    peak_counts,
    peak_position,
    snap_peak,
    snap_peaks,
)


def test_snap_peak_moves_to_lowest_sample():
    profile = [5, 4, 3, 2, 1, 2, 3]
    assert snap_peak(profile, 1) == 4
    assert snap_peak(profile, 6) == 4


def test_snap_peak_respects_max_speed():
    profile = [5, 4, 3, 2, 1, 2, 3]
    assert snap_peak(profile, 0, max_speed=2) == 1


def test_snap_peaks_drops_out_of_range():
    profile = [3, 1, 3, 3, 0, 3]
    assert snap_peaks(profile, [0, 5, 12], max_speed=2) == [1, 4]


def test_peak_position():
    peaks = [2, 5, 9]
    assert peak_position(peaks, 5) == 1
    assert peak_position(peaks, 6) == -3
    assert peak_position(peaks, 0) == -1
    assert peak_position(peaks, 10) == -4
    assert peak_position([], 3) == -1


def test_add_peak_keeps_order():
    peaks = [2, 9]
    assert add_peak(peaks, 5, 20) == 1
    assert peaks == [2, 5, 9]
    assert add_peak(peaks, 5, 20) == 1
    assert add_peak(peaks, 25, 20) == -1
    assert peaks == [2, 5, 9]


def test_move_peak_keeps_order():
    peaks = [2, 5, 9]
    assert move_peak(peaks, 0, 7) == 1
    assert peaks == [5, 7, 9]
    assert move_peak(peaks, 2, 1) == 0
    assert peaks == [1, 5, 7]


def test_peak_counts_regularized():
    counts, regularized = peak_counts([[1, 2], [1], None, [1, 2, 3]])
    np.testing.assert_array_equal(counts, [2, 1, 0, 3])
    np.testing.assert_array_equal(regularized, [2, 2, 2, 3])


def test_default_minimal_slope():
    assert default_minimal_slope([[0, 10], [5, 5, 5, 5], None]) == 2.5
    assert default_minimal_slope([]) == 0.0


def test_initialize_peaks_finds_troughs():
    i = np.arange(21, dtype=float)
    trough = np.abs(i - 10)
    peaks = initialize_peaks([trough, None], window=3, minimal_slope=0.1)
    assert peaks == [[10], []]
