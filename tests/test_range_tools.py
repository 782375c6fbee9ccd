import numpy as np
import pytest

from kymophase.errors import InvalidInputError
from kymophase.tools.range_tools import (
    compensate_for_decay,
    divide,
    frange,
    log_series,
    sub_series,
    trim_outliers,
)


def test_frange_includes_end():
    np.testing.assert_array_equal(frange(0, 4), [0, 1, 2, 3, 4])
    np.testing.assert_allclose(frange(0, 1, 0.25), [0, 0.25, 0.5, 0.75, 1.0])
    assert frange(3, 1).size == 0


def test_frange_rejects_non_positive_step():
    with pytest.raises(InvalidInputError):
        frange(0, 1, 0)


def test_sub_series_copies():
    series = np.array([1.0, 2.0, 3.0, 4.0])
    part = sub_series(series, 1, 3)
    part[0] = 99
    np.testing.assert_array_equal(series, [1, 2, 3, 4])
    np.testing.assert_array_equal(sub_series(series, 2), [3, 4])


def test_trim_outliers_only_trims_the_ends():
    series = [100, 1, 2, 1, 2, 1, 2, -100]
    np.testing.assert_array_equal(trim_outliers(series, 1.5), [1, 2, 1, 2, 1, 2])


def test_trim_outliers_keeps_clean_series():
    series = np.array([1.0, 2.0, 1.0, 2.0])
    np.testing.assert_array_equal(trim_outliers(series, 3.0), series)


def test_log_and_divide():
    np.testing.assert_allclose(log_series([1, np.e]), [0, 1])
    np.testing.assert_allclose(divide([2, 4], 2), [1, 2])
    np.testing.assert_allclose(divide([2, 4], [1, 4]), [2, 1])


def test_compensate_for_decay_removes_trend():
    x = np.arange(10, dtype=float)
    series = 5 - 0.5 * x + np.where(x % 2 == 0, 1.0, -1.0)
    detrended = compensate_for_decay(series)
    assert detrended.mean() == pytest.approx(0.0, abs=1e-12)
    np.testing.assert_allclose(compensate_for_decay(2 * x + 1), 0, atol=1e-12)
