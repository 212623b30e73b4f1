"""
sRGB <-> linear light conversion for RGBA pixel buffers.

RGB channels go through the sRGB transfer function; alpha is only rescaled
between [0, 255] and [0, 1]. Conversions are vectorised over whole buffers.
"""

import numpy as np

from .. import constants as cte


def fast_clamp(values) -> np.ndarray:
    """Round half up and clamp to the byte range, returning uint8."""
    rounded = np.floor(np.asarray(values, dtype=np.float64) + 0.5)
    return np.clip(rounded, 0, 255).astype(np.uint8)


def srgb_to_linear(c):
    """
    Inverse sRGB transfer function.

    Args:
        c: sRGB value(s) in [0, 255]

    Returns:
        Linear light value(s) in [0, 1] (float64)
    """
    c = np.asarray(c, dtype=np.float64) / 255.0
    return np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)


def linear_to_srgb(c) -> np.ndarray:
    """
    Forward sRGB transfer function.

    Args:
        c: Linear light value(s), nominally in [0, 1]

    Returns:
        numpy.ndarray: uint8 sRGB value(s), rounded and clamped
    """
    c = np.asarray(c, dtype=np.float64)
    # negative inputs take the linear branch and clamp to 0
    powered = 1.055 * np.power(np.maximum(c, 0.0), 1.0 / 2.4) - 0.055
    srgb = np.where(c <= 0.0031308, 12.92 * c, powered)
    return fast_clamp(srgb * 255.0)


def to_linear(src: np.ndarray) -> np.ndarray:
    """Convert an interleaved RGBA uint8 buffer to linear float32."""
    src = np.asarray(src)
    if src.dtype != np.uint8:
        raise TypeError("src must be a uint8 buffer")
    pixels = src.reshape(-1, cte.CHANNELS)
    out = np.empty(pixels.shape, dtype=cte.FLOAT_TYPE_NP)
    out[:, :3] = srgb_to_linear(pixels[:, :3])
    out[:, 3] = pixels[:, 3] / 255.0
    return out.reshape(-1)


def to_srgb(linear_data: np.ndarray) -> np.ndarray:
    """Convert an interleaved RGBA linear float buffer back to uint8 sRGB."""
    linear_data = np.asarray(linear_data)
    if not np.issubdtype(linear_data.dtype, np.floating):
        raise TypeError("linear_data must be a floating point buffer")
    pixels = linear_data.reshape(-1, cte.CHANNELS)
    out = np.empty(pixels.shape, dtype=np.uint8)
    out[:, :3] = linear_to_srgb(pixels[:, :3])
    out[:, 3] = fast_clamp(pixels[:, 3] * 255.0)
    return out.reshape(-1)


__all__ = ["fast_clamp", "srgb_to_linear", "linear_to_srgb", "to_linear", "to_srgb"]
