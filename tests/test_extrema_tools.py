import numpy as np
import pytest

from kymophase.tools.extrema_tools import (
    Extrema,
    find_maxima,
    find_minima,
    find_slope_extrema,
)


def triangle(peak=10, half_width=10):
    i = np.arange(2 * half_width + 1, dtype=float)
    return half_width - np.abs(i - peak)


# ============================
# Tolerance interval
# ============================
def test_single_clean_minimum():
    result = find_minima([5, 3, 1, 0, 1, 3, 5], 0.1)
    np.testing.assert_array_equal(result.x, [3])
    np.testing.assert_array_equal(result.intensities, [0])


def test_tied_minimum_reports_every_index():
    result = find_minima([3, 0, 0, 0, 3], 0.1)
    np.testing.assert_array_equal(result.x, [1, 2, 3])


def test_several_minima_in_order():
    series = [4, 1, 4, 6, 4, 2, 4]
    result = find_minima(series, 0.1)
    np.testing.assert_array_equal(result.x, [1, 5])
    np.testing.assert_array_equal(result.intensities, [1, 2])


def test_shallow_dip_within_tolerance_is_rejected():
    # index 3 sits at 1.2 but the stable interval reaches the deeper 1.0 at index 1
    series = [5, 1.0, 1.3, 1.2, 1.3, 5]
    result = find_minima(series, 0.2)
    np.testing.assert_array_equal(result.x, [1])


def test_maxima_negate_back():
    series = np.array([0.0, 2.0, 5.0, 2.0, 0.0])
    before = series.copy()

    result = find_maxima(series, 0.1)

    np.testing.assert_array_equal(result.x, [2])
    np.testing.assert_array_equal(result.intensities, [5])
    np.testing.assert_array_equal(series, before)


def test_refined_minimum_is_the_parabola_vertex():
    x = np.arange(8, dtype=float)
    series = (x - 3.3) ** 2

    result = find_minima(series, 1.0, refine=True)

    assert len(result) == 1
    assert result.x[0] == pytest.approx(3.3)
    assert result.intensities[0] == pytest.approx(0.0, abs=1e-9)


def test_refined_two_sample_interval_picks_lower():
    result = find_minima([5, 1.0, 1.05, 5], 0.05, refine=True)
    np.testing.assert_array_equal(result.x, [1.0])
    np.testing.assert_array_equal(result.intensities, [1.0])


def test_refined_flat_interval_collapses_to_one_position():
    result = find_minima([3, 0, 0, 0, 3], 0.1, refine=True)
    assert len(result) == 1


def test_short_series_has_no_extrema():
    assert len(find_minima([1, 0], 0.1)) == 0


# ============================
# Slope window
# ============================
def test_slope_window_triangle_peak():
    result = find_slope_extrema(triangle(), 3, 0.1, find_maxima=True)
    np.testing.assert_array_equal(result.x, [10])
    np.testing.assert_array_equal(result.intensities, [10])


def test_slope_window_trough():
    result = find_slope_extrema(-triangle(), 3, 0.1, find_maxima=False)
    np.testing.assert_array_equal(result.x, [10])
    np.testing.assert_array_equal(result.intensities, [-10])


def test_slope_window_separated_peaks():
    series = np.concatenate([triangle(), triangle()[1:]])
    result = find_slope_extrema(series, 3, 0.1)
    np.testing.assert_array_equal(result.x, [10, 30])


def test_slope_window_ignores_gentle_slopes():
    result = find_slope_extrema(0.01 * triangle(), 3, 0.1)
    assert len(result) == 0


def test_slope_window_too_short_series():
    assert len(find_slope_extrema([1, 2, 1], 3, 0.1)) == 0


def test_extrema_iterates_pairs_and_frames():
    result = Extrema(np.array([1.0, 4.0]), np.array([0.5, 0.25]))
    assert list(result) == [(1.0, 0.5), (4.0, 0.25)]
    frame = result.to_frame()
    assert list(frame.columns) == ["x", "intensity"]
    assert len(frame) == 2
