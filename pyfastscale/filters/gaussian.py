"""
Gaussian kernels for the unsharp mask blur.

Kernels are cached by sigma rounded to two decimals. The cache is an object
owned by whichever resizer uses it, so separate engines never share state.
"""

import math

import numpy as np

from .. import constants as cte


def gaussian_kernel(sigma: float) -> np.ndarray:
    """
    Build a normalised 1D Gaussian kernel.

    The kernel spans ceil(3 * sigma) taps on either side of the centre and
    sums to 1. A sigma of 0 yields the identity kernel [1].

    Args:
        sigma: Standard deviation in pixels (negative values are treated as 0)

    Returns:
        numpy.ndarray: float32 kernel of odd length
    """
    sigma = max(sigma, 0.0)
    if sigma == 0:
        return np.ones(1, dtype=cte.FLOAT_TYPE_NP)

    radius = int(math.ceil(sigma * 3))
    taps = np.arange(-radius, radius + 1, dtype=np.float64)
    kernel = np.exp(-(taps * taps) / (2 * sigma * sigma))
    kernel /= kernel.sum()
    return kernel.astype(cte.FLOAT_TYPE_NP)


class GaussianKernelCache:
    """Memoised Gaussian kernels keyed by quantised sigma."""

    def __init__(self):
        self._cache = {}

    @staticmethod
    def key(sigma: float) -> float:
        return round(max(sigma, 0.0), cte.SIGMA_KEY_DIGITS)

    def create(self, sigma: float) -> np.ndarray:
        key = self.key(sigma)
        kernel = self._cache.get(key)
        if kernel is None:
            kernel = gaussian_kernel(key)
            kernel.setflags(write=False)
            self._cache[key] = kernel
        return kernel

    def clear(self):
        self._cache.clear()

    clear_cache = clear

    def __len__(self):
        return len(self._cache)

    def __contains__(self, sigma):
        return self.key(sigma) in self._cache


__all__ = ["gaussian_kernel", "GaussianKernelCache"]
