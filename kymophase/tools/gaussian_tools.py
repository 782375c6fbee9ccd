"""
Holds the normalized 1D Gaussian kernel used to pre-smooth kymograph rows.
"""

import math

import numpy as np
from scipy.ndimage import correlate1d

from ..errors import InvalidInputError


class Gaussian1D:
    """
    Discrete Gaussian of radius ceil(2*sigma), normalized to sum 1.

    smooth() mirrors the segment at both ends ("d c b a | a b c d | d c b a",
    scipy's 'reflect' mode), so nothing outside the requested segment is read.
    """

    def __init__(self, sigma: float):
        if not sigma > 0:
            raise InvalidInputError(f"sigma must be > 0, got {sigma!r}")
        self.sigma = float(sigma)
        self.radius = int(math.ceil(2 * self.sigma))
        i = np.arange(-self.radius, self.radius + 1, dtype=float)
        kernel = np.exp(-0.5 * i * i / (self.sigma * self.sigma))
        kernel /= kernel.sum()
        kernel.setflags(write=False)
        self.kernel = kernel

    @property
    def size(self) -> int:
        return self.kernel.size

    def _segment(self, data, offset, length):
        data = np.asarray(data)
        if data.ndim != 1:
            raise InvalidInputError("Gaussian1D smooths 1D series only")
        if length is None:
            length = data.shape[0] - offset
        if offset < 0 or offset + length > data.shape[0]:
            raise InvalidInputError(
                f"segment [{offset}, {offset + length}) outside series of length {data.shape[0]}"
            )
        if length < self.size:
            raise InvalidInputError(
                f"Too few data: {length} samples for a kernel of {self.size}"
            )
        return data, offset, length

    def smooth(self, data, offset: int = 0, length: int = None) -> np.ndarray:
        """
        Return data[offset:offset+length] convolved with the kernel, as a new
        float array. `data` is left untouched.
        """
        data, offset, length = self._segment(data, offset, length)
        segment = np.asarray(data[offset:offset + length], dtype=float)
        # symmetric kernel: correlation == convolution
        return correlate1d(segment, self.kernel, mode="reflect")

    def smooth_into(self, data: np.ndarray, offset: int = 0, length: int = None) -> np.ndarray:
        """Smooth a segment of a float array in place; returns `data`."""
        data, offset, length = self._segment(data, offset, length)
        data[offset:offset + length] = self.smooth(data, offset, length)
        return data
