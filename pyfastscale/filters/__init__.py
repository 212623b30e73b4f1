"""
Filter library for PyFastScale.

Provides the reconstruction filters used by the separable resampler and the
Gaussian kernels used by the unsharp mask.

Usage:
    import pyfastscale as pfs

    pfs.filters.weight("lanczos3", 0.5)
    cfg = pfs.filters.get_filter("mks2013")
    cfg.support, cfg.factor
"""

from .kernels import (
    FILTERS,
    FILTER_INDEX,
    FilterConfig,
    get_filter,
    get_filter_info,
    weight,
)
from .gaussian import GaussianKernelCache, gaussian_kernel

__all__ = [
    "FILTERS",
    "FILTER_INDEX",
    "FilterConfig",
    "get_filter",
    "get_filter_info",
    "weight",
    "GaussianKernelCache",
    "gaussian_kernel",
]
