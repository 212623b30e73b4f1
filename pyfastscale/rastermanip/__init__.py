"""Raster manipulation module for PyFastScale.

CPU image resampling: contribution tables, separable horizontal/vertical passes,
multi-step scaling for extreme ratios, gamma-correct processing and unsharp
masking. Inputs are flat RGBA buffers (uint8 or linear float32).
"""

from .buffers import BufferKind, PixelBuffer, check_buffer_length
from .contributions import (
    Contribution,
    ContributionCache,
    ContributionTable,
    compute_contributions,
    effective_support,
)
from .multistep import (
    axis_steps,
    multi_step_horizontal,
    multi_step_vertical,
    needs_multi_step,
    next_step_size,
)
from .request import ResizeRequest, ValidRequest, validate_request
from .resizing import CPUResizer, fit_to_max_dim, resize
from .separable import resize_horizontal, resize_vertical
from .unsharp import blur, unsharp

__all__ = [
    "BufferKind",
    "PixelBuffer",
    "check_buffer_length",
    "Contribution",
    "ContributionCache",
    "ContributionTable",
    "compute_contributions",
    "effective_support",
    "axis_steps",
    "multi_step_horizontal",
    "multi_step_vertical",
    "needs_multi_step",
    "next_step_size",
    "ResizeRequest",
    "ValidRequest",
    "validate_request",
    "CPUResizer",
    "fit_to_max_dim",
    "resize",
    "resize_horizontal",
    "resize_vertical",
    "blur",
    "unsharp",
]
