"""
Color conversion module for PyFastScale.

Per-channel sRGB <-> linear light transforms used for gamma-correct
resampling.
"""

from .srgb import fast_clamp, linear_to_srgb, srgb_to_linear, to_linear, to_srgb

__all__ = ["fast_clamp", "linear_to_srgb", "srgb_to_linear", "to_linear", "to_srgb"]
