"""Weighted moving average across neighbouring bins.

Steadies the bar display: each interior value becomes the kernel-weighted
mean of its neighbourhood. The first and last len(kernel) // 2 values
pass through untouched.
"""

import numpy as np

from bargraph.config import KERNEL, validate_kernel

DEFAULT_KERNEL = KERNEL


class Smoother:
    """Applies a fixed odd-length kernel, normalised by its sum."""

    def __init__(self, kernel=DEFAULT_KERNEL):
        self._kernel = np.array(validate_kernel(kernel), dtype=np.float64)
        self._total = float(self._kernel.sum())
        self._half = len(self._kernel) // 2

    @property
    def kernel(self) -> tuple:
        return tuple(self._kernel.tolist())

    @property
    def half_width(self) -> int:
        return self._half

    def smooth(self, spectrum) -> np.ndarray:
        """Return a new array the same length as `spectrum`.

        out[i] = sum(spectrum[i - half + j] * kernel[j]) / sum(kernel)
        for half <= i < len - half; every other index is copied as-is.
        """
        spectrum = np.asarray(spectrum, dtype=np.float64)
        out = spectrum.copy()
        if len(spectrum) < len(self._kernel):
            return out
        # correlate (not convolve) keeps kernel[j] aligned with i - half + j
        interior = np.correlate(spectrum, self._kernel, mode="valid") / self._total
        out[self._half:len(spectrum) - self._half] = interior
        return out

    __call__ = smooth
