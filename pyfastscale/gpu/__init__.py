"""
GPU resize path.

Taichi kernels for every pass of the resize pipeline and the TaichiResizer
backend that chains them on pooled fields.
"""

from .gpu_resizer import TaichiResizer
from .kernels import (
    blur_pass_kernel,
    resize_pass_kernel,
    to_linear_kernel,
    to_srgb_kernel,
    unsharp_kernel,
)

__all__ = [
    "TaichiResizer",
    "resize_pass_kernel",
    "to_linear_kernel",
    "to_srgb_kernel",
    "blur_pass_kernel",
    "unsharp_kernel",
]
