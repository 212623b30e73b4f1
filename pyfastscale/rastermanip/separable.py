"""
Separable resampling passes.

A 2D resize is performed as two 1D passes, horizontal first and vertical second.
Each pass gathers one tap column of the contribution table at a time and
accumulates weighted source rows or columns in float64. Linear (float) buffers
are stored as float32 unchanged; byte buffers are rounded and clamped to uint8
after every pass.
"""

import numpy as np

from .. import constants as cte
from ..color import fast_clamp
from .buffers import check_buffer_length
from .contributions import ContributionCache, effective_support


def _store(acc: np.ndarray, dest: np.ndarray, is_linear: bool):
    flat = acc.reshape(-1)
    if is_linear:
        dest[...] = flat.astype(cte.FLOAT_TYPE_NP)
    else:
        dest[...] = fast_clamp(flat)


def _table(cache, dest_size, src_size, filter_config):
    if cache is None:
        cache = ContributionCache()
    scale = dest_size / src_size
    support = effective_support(filter_config, scale)
    return cache.calculate(dest_size, src_size, scale, support, filter_config)


def resize_horizontal(
    src,
    dest,
    src_width: int,
    src_height: int,
    dest_width: int,
    filter_config,
    is_linear: bool,
    cache: ContributionCache | None = None,
):
    """
    Resample every row of ``src`` from src_width to dest_width samples.

    Args:
        src: Flat RGBA buffer of src_width * src_height pixels
        dest: Flat buffer of dest_width * src_height pixels, written in place
        src_width: Source width
        src_height: Source (and destination) height
        dest_width: Destination width
        filter_config: Reconstruction filter
        is_linear: Keep float results (True) or round/clamp to bytes (False)
        cache: Contribution cache to read tables from

    Returns:
        The ``dest`` buffer
    """
    check_buffer_length(src, src_width, src_height, "src")
    check_buffer_length(dest, dest_width, src_height, "dest")
    table = _table(cache, dest_width, src_width, filter_config)

    pixels = np.asarray(src).reshape(src_height, src_width, cte.CHANNELS)
    acc = np.zeros((src_height, dest_width, cte.CHANNELS), dtype=np.float64)
    for k in range(table.taps):
        columns = table.index_matrix[:, k]
        weights = table.weight_matrix[:, k]
        acc += pixels[:, columns, :] * weights[None, :, None]

    _store(acc, dest, is_linear)
    return dest


def resize_vertical(
    src,
    dest,
    src_width: int,
    src_height: int,
    dest_height: int,
    filter_config,
    is_linear: bool,
    cache: ContributionCache | None = None,
):
    """Resample every column of ``src`` from src_height to dest_height samples."""
    check_buffer_length(src, src_width, src_height, "src")
    check_buffer_length(dest, src_width, dest_height, "dest")
    table = _table(cache, dest_height, src_height, filter_config)

    pixels = np.asarray(src).reshape(src_height, src_width, cte.CHANNELS)
    acc = np.zeros((dest_height, src_width, cte.CHANNELS), dtype=np.float64)
    for k in range(table.taps):
        rows = table.index_matrix[:, k]
        weights = table.weight_matrix[:, k]
        acc += pixels[rows, :, :] * weights[:, None, None]

    _store(acc, dest, is_linear)
    return dest


__all__ = ["resize_horizontal", "resize_vertical"]
