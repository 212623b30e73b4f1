"""
Gaussian blur and unsharp mask post-processing.

Both operate on uint8 RGBA buffers. The blur is separable (horizontal then
vertical) with reflect-at-edge boundaries, and each pass is rounded back to
bytes. The unsharp mask adds the thresholded high-frequency residual
(source - blurred) back onto the RGB channels; alpha is passed through.
"""

import numpy as np

from .. import constants as cte
from ..color import fast_clamp
from ..filters import GaussianKernelCache
from .buffers import check_buffer_length


def reflect_indices(indices: np.ndarray, size: int) -> np.ndarray:
    """
    Reflect out-of-range sample indices back into [0, size).

    Index i < 0 maps to -i and index i >= size maps to 2 * size - i - 1. The
    result is clamped as a last resort for images narrower than the kernel.
    """
    indices = np.where(indices < 0, -indices, indices)
    indices = np.where(indices >= size, 2 * size - indices - 1, indices)
    return np.clip(indices, 0, size - 1)


def _blur_axis(pixels: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    size = pixels.shape[axis]
    half = len(kernel) // 2
    positions = np.arange(size)
    acc = np.zeros(pixels.shape, dtype=np.float64)
    for k in range(-half, half + 1):
        taps = reflect_indices(positions + k, size)
        acc += np.take(pixels, taps, axis=axis) * float(kernel[k + half])
    return fast_clamp(acc)


def blur(src, width: int, height: int, radius: float, kernels: GaussianKernelCache | None = None):
    """
    Separable Gaussian blur of a uint8 RGBA buffer.

    Args:
        src: Flat uint8 buffer of width * height pixels
        width: Image width
        height: Image height
        radius: Blur radius, used as sigma (at least 0.5)
        kernels: Gaussian kernel cache

    Returns:
        numpy.ndarray: Blurred flat uint8 buffer
    """
    check_buffer_length(src, width, height, "src")
    if kernels is None:
        kernels = GaussianKernelCache()
    kernel = kernels.create(max(radius, cte.MIN_BLUR_SIGMA))

    pixels = np.asarray(src, dtype=np.uint8).reshape(height, width, cte.CHANNELS)
    temp = _blur_axis(pixels, kernel, axis=1)
    out = _blur_axis(temp, kernel, axis=0)
    return out.reshape(-1)


def unsharp(
    src,
    width: int,
    height: int,
    amount: float,
    radius: float,
    threshold: float,
    kernels: GaussianKernelCache | None = None,
):
    """
    Unsharp mask of a uint8 RGBA buffer.

    Args:
        src: Flat uint8 buffer of width * height pixels
        width: Image width
        height: Image height
        amount: Sharpening strength in percent
        radius: Blur radius (capped at 2.0)
        threshold: Minimum |source - blurred| in byte units to sharpen
        kernels: Gaussian kernel cache

    Returns:
        numpy.ndarray: Sharpened flat uint8 buffer
    """
    src = np.asarray(src, dtype=np.uint8)
    blurred = blur(src, width, height, min(radius, cte.MAX_UNSHARP_RADIUS), kernels)

    pixels = src.reshape(-1, cte.CHANNELS)
    soft = blurred.reshape(-1, cte.CHANNELS)

    rgb = pixels[:, :3].astype(np.float64)
    diff = rgb - soft[:, :3]
    diff[np.abs(diff) < threshold] = 0

    out = np.empty_like(pixels)
    out[:, :3] = fast_clamp(rgb + diff * (amount / 100.0))
    out[:, 3] = pixels[:, 3]
    return out.reshape(-1)


__all__ = ["blur", "unsharp", "reflect_indices"]
