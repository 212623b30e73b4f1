"""
Multi-step scaling for extreme scale ratios.

A single pass whose ratio is far from 1 either needs a very wide support
(downscaling) or samples the source too sparsely (upscaling). Instead, an axis
is resized through intermediate sizes that halve or double the current size
until the remaining ratio is within [0.5, 2], followed by one final pass to the
exact target.

Example:
    axis_steps(256, 8)  -> [128, 64, 32, 16, 8]
    axis_steps(10, 100) -> [20, 40, 80, 100]
    axis_steps(100, 60) -> [60]
"""

from .buffers import allocate, check_buffer_length
from .separable import resize_horizontal, resize_vertical


def needs_multi_step(current: int, target: int) -> bool:
    """True when one pass from ``current`` to ``target`` exceeds a factor of 2."""
    if target < current:
        return current / 2 > target
    if target > current:
        return current * 2 < target
    return False


def next_step_size(current: int, target: int) -> int:
    """Size of the next pass from ``current`` towards ``target``."""
    if target < current:
        if current / 2 > target:
            return max(target, current // 2)
        return target
    if target > current:
        if current * 2 < target:
            return min(target, current * 2)
        return target
    return current


def axis_steps(current: int, target: int):
    """All intermediate sizes along one axis, ending with ``target``."""
    steps = []
    while current != target:
        current = next_step_size(current, target)
        steps.append(current)
    return steps


def multi_step_horizontal(src, src_width, src_height, dest_width, filter_config, is_linear, cache=None):
    """
    Resize the horizontal axis through halving/doubling steps.

    Args:
        src: Flat RGBA buffer of src_width * src_height pixels
        src_width: Source width
        src_height: Source height (unchanged)
        dest_width: Final width
        filter_config: Reconstruction filter
        is_linear: Working representation of the buffers
        cache: Contribution cache

    Returns:
        numpy.ndarray: Buffer of dest_width * src_height pixels
    """
    current_width = src_width
    current = src
    for next_width in axis_steps(src_width, dest_width):
        nxt = allocate(next_width, src_height, is_linear)
        resize_horizontal(
            current, nxt, current_width, src_height, next_width, filter_config, is_linear, cache
        )
        check_buffer_length(nxt, next_width, src_height, "intermediate")
        current = nxt
        current_width = next_width
    return current


def multi_step_vertical(src, src_width, src_height, dest_height, filter_config, is_linear, cache=None):
    """Resize the vertical axis through halving/doubling steps."""
    current_height = src_height
    current = src
    for next_height in axis_steps(src_height, dest_height):
        nxt = allocate(src_width, next_height, is_linear)
        resize_vertical(
            current, nxt, src_width, current_height, next_height, filter_config, is_linear, cache
        )
        check_buffer_length(nxt, src_width, next_height, "intermediate")
        current = nxt
        current_height = next_height
    return current


__all__ = [
    "axis_steps",
    "needs_multi_step",
    "next_step_size",
    "multi_step_horizontal",
    "multi_step_vertical",
]
