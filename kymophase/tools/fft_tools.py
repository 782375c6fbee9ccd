"""
Radix-2 Cooley-Tukey FFT on complex numpy arrays, plus the pointwise complex
helpers used with it.
"""

import numpy as np

from ..errors import InvalidInputError


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def fft(x) -> np.ndarray:
    """
    Discrete Fourier transform of `x` (length must be a power of two).
    Same sign convention as numpy.fft.fft.
    """
    x = np.asarray(x, dtype=complex)
    n = x.shape[0]
    if not _is_power_of_two(n):
        raise InvalidInputError(f"FFT length {n} is not a power of 2")
    return _fft(x)


def _fft(x: np.ndarray) -> np.ndarray:
    n = x.shape[0]
    if n == 1:
        return x.copy()

    q = _fft(x[0::2])
    r = _fft(x[1::2])

    half = n // 2
    angle = -2.0 * np.pi * np.arange(half) / n
    c = np.cos(angle)
    s = np.sin(angle)
    kr = c * r.real - s * r.imag
    ki = c * r.imag + s * r.real
    twiddled = kr + 1j * ki

    y = np.empty(n, dtype=complex)
    y[:half] = q + twiddled
    y[half:] = q - twiddled
    return y


def conjugate(x) -> np.ndarray:
    return np.conj(np.asarray(x, dtype=complex))


def scale(x, factor) -> np.ndarray:
    return np.asarray(x, dtype=complex) * factor


def divide(x, factor) -> np.ndarray:
    return np.asarray(x, dtype=complex) / factor


def multiply(x, y) -> np.ndarray:
    """Pointwise complex product."""
    return np.asarray(x, dtype=complex) * np.asarray(y, dtype=complex)


def ifft(x) -> np.ndarray:
    x = np.asarray(x, dtype=complex)
    return divide(conjugate(fft(conjugate(x))), x.shape[0])


def real_spectrum(series) -> np.ndarray:
    """
    Real part of the FFT of a real series, padded with its mean up to the
    next power of two.
    """
    series = np.asarray(series, dtype=float)
    if series.size == 0:
        raise InvalidInputError("cannot transform an empty series")
    size = 1
    while size < series.size:
        size *= 2
    padded = np.full(size, series.mean())
    padded[:series.size] = series
    return fft(padded).real
