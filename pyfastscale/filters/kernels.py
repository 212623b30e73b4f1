"""
Reconstruction filters for PyFastScale.

Each filter maps a normalised distance (in source samples at unit scale) to a
weight and declares the half-width beyond which that weight is zero. The same
table drives the CPU contribution tables and, through FILTER_INDEX, the
per-pixel weight evaluation of the GPU kernels.

Filters:
- box: nearest-neighbour style averaging, support 0.5
- hamming: raised-cosine window, support 1
- lanczos2 / lanczos3: windowed sinc with 2 or 3 lobes
- mks2013: Mitchell-Netravali cubic with B = C = 1/3
- bicubic: Catmull-Rom style cubic (a = -0.5)
"""

import math
from dataclasses import dataclass, field
from typing import Callable

from ..errors import ResizeValidationError


def box(x: float) -> float:
    return 1.0 if abs(x) <= 0.5 else 0.0


def hamming(x: float) -> float:
    ax = abs(x)
    if ax >= 1.0:
        return 0.0
    return 0.54 + 0.46 * math.cos(math.pi * ax)


def _lanczos(x: float, lobes: float) -> float:
    if x == 0:
        return 1.0
    if abs(x) >= lobes:
        return 0.0
    xpi = math.pi * x
    xpi_l = xpi / lobes
    return (math.sin(xpi) * math.sin(xpi_l)) / (xpi * xpi_l)


def lanczos2(x: float) -> float:
    return _lanczos(x, 2.0)


def lanczos3(x: float) -> float:
    return _lanczos(x, 3.0)


def mitchell_netravali(x: float, b: float = 1.0 / 3.0, c: float = 1.0 / 3.0) -> float:
    """
    Two-piece Mitchell-Netravali cubic.

    Args:
        x: Normalised distance
        b: B parameter (blur)
        c: C parameter (ringing)

    Returns:
        float: Filter weight, 0 for |x| >= 2
    """
    ax = abs(x)
    if ax < 1.0:
        return (
            (12 - 9 * b - 6 * c) * ax**3
            + (-18 + 12 * b + 6 * c) * ax**2
            + (6 - 2 * b)
        ) / 6
    if ax < 2.0:
        return (
            (-b - 6 * c) * ax**3
            + (6 * b + 30 * c) * ax**2
            + (-12 * b - 48 * c) * ax
            + (8 * b + 24 * c)
        ) / 6
    return 0.0


def bicubic(x: float) -> float:
    ax = abs(x)
    if ax <= 1.0:
        return 1.5 * ax**3 - 2.5 * ax**2 + 1
    if ax < 2.0:
        return -0.5 * ax**3 + 2.5 * ax**2 - 4 * ax + 2
    return 0.0


@dataclass(frozen=True)
class FilterConfig:
    """
    Immutable description of a reconstruction filter.

    Attributes:
        name: Filter identifier, also used in contribution cache keys
        support: Half-width in source samples at unit scale
        factor: Width multiplier for filters whose natural support is scale
                invariant (lanczos uses its lobe count, the rest use 1)
        fn: Weight function of the normalised distance
        description: Human readable summary
    """

    name: str
    support: float
    factor: float
    fn: Callable[[float], float] = field(compare=False)
    description: str = ""

    def weight(self, x: float) -> float:
        return self.fn(x)


FILTERS = {
    "box": FilterConfig(
        "box", 0.5, 1.0, box, "fast box filter for nearest neighbor scaling"
    ),
    "hamming": FilterConfig(
        "hamming", 1.0, 1.0, hamming, "good balance of speed and quality"
    ),
    "lanczos2": FilterConfig(
        "lanczos2", 2.0, 2.0, lanczos2, "high quality lanczos with 2 lobe window"
    ),
    "lanczos3": FilterConfig(
        "lanczos3", 3.0, 3.0, lanczos3, "very high quality lanczos with 3 lobe window"
    ),
    "mks2013": FilterConfig(
        "mks2013",
        2.0,
        1.0,
        mitchell_netravali,
        "mitchell netravali based filter with built in sharpening",
    ),
    "bicubic": FilterConfig(
        "bicubic", 2.0, 2.0, bicubic, "bicubic filter, good for downscaling with sharpening"
    ),
}

# Integer ids understood by the GPU kernels
FILTER_INDEX = {
    "box": 0,
    "hamming": 1,
    "lanczos2": 2,
    "lanczos3": 3,
    "mks2013": 4,
    "bicubic": 5,
}


def get_filter(name: str) -> FilterConfig:
    """Return the FilterConfig registered under ``name``."""
    try:
        return FILTERS[name]
    except (KeyError, TypeError):
        raise ResizeValidationError(
            f"unsupported filter: {name!r}, expected one of {sorted(FILTERS)}"
        ) from None


def weight(filter_name: str, x: float) -> float:
    """Evaluate the named filter at normalised distance ``x``."""
    return get_filter(filter_name).weight(x)


def get_filter_info():
    """Return support, factor and description for every filter."""
    return {
        name: {
            "support": cfg.support,
            "factor": cfg.factor,
            "description": cfg.description,
        }
        for name, cfg in FILTERS.items()
    }


__all__ = [
    "FilterConfig",
    "FILTERS",
    "FILTER_INDEX",
    "get_filter",
    "get_filter_info",
    "weight",
    "box",
    "hamming",
    "lanczos2",
    "lanczos3",
    "mitchell_netravali",
    "bicubic",
]
