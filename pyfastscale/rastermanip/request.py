"""
Resize requests and their validation.

A ResizeRequest mirrors the direct call contract (src, width, height, to_width,
to_height, filter, unsharp options, gamma_correct, dest). Validation happens
before any processing and produces a ValidRequest whose source has been
resolved into a tagged PixelBuffer.
"""

import numbers
from dataclasses import dataclass, fields, replace

import numpy as np

from .. import constants as cte
from ..errors import ResizeValidationError
from ..filters import FilterConfig, get_filter
from .buffers import PixelBuffer, buffer_length


@dataclass
class ResizeRequest:
    src: object
    width: int
    height: int
    to_width: int
    to_height: int
    filter: str = cte.DEFAULT_FILTER
    unsharp_amount: float = cte.DEFAULT_UNSHARP_AMOUNT
    unsharp_radius: float = cte.DEFAULT_UNSHARP_RADIUS
    unsharp_threshold: float = cte.DEFAULT_UNSHARP_THRESHOLD
    gamma_correct: bool = cte.DEFAULT_GAMMA_CORRECT
    dest: np.ndarray | None = None

    @classmethod
    def from_dict(cls, options):
        """Build a request from a mapping using the direct call field names."""
        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise ResizeValidationError(f"unknown request fields: {sorted(unknown)}")
        missing = {"src", "width", "height", "to_width", "to_height"} - set(options)
        if missing:
            raise ResizeValidationError(f"missing request fields: {sorted(missing)}")
        return cls(**options)


@dataclass(frozen=True)
class ValidRequest:
    """A request that passed validation. Backends only ever see these."""

    source: PixelBuffer
    to_width: int
    to_height: int
    filter_config: FilterConfig
    unsharp_amount: float
    unsharp_radius: float
    unsharp_threshold: float
    gamma_correct: bool
    dest: np.ndarray | None = None

    @property
    def width(self):
        return self.source.width

    @property
    def height(self):
        return self.source.height

    @property
    def is_empty_target(self):
        return self.to_width == 0 or self.to_height == 0

    @property
    def is_identity(self):
        return self.width == self.to_width and self.height == self.to_height

    @property
    def wants_unsharp(self):
        return self.unsharp_amount > 0 and self.unsharp_radius >= cte.MIN_UNSHARP_RADIUS

    def without_dest(self):
        return replace(self, dest=None)


def _is_int(value):
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_number(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def validate_request(request) -> ValidRequest:
    """
    Validate a resize request.

    Args:
        request: ResizeRequest, mapping with the same keys, or an already
                 validated ValidRequest (returned unchanged)

    Returns:
        ValidRequest: Request with a resolved PixelBuffer source

    Raises:
        ResizeValidationError: On any invalid field or buffer length mismatch
    """
    if isinstance(request, ValidRequest):
        return request
    if isinstance(request, dict):
        request = ResizeRequest.from_dict(request)
    if not isinstance(request, ResizeRequest):
        raise ResizeValidationError(
            f"request must be a ResizeRequest or dict, got {type(request).__name__}"
        )

    if not _is_int(request.width) or request.width <= 0:
        raise ResizeValidationError("width must be positive integer")
    if not _is_int(request.height) or request.height <= 0:
        raise ResizeValidationError("height must be positive integer")
    if not _is_int(request.to_width) or request.to_width < 0:
        raise ResizeValidationError("to_width must be non-negative integer")
    if not _is_int(request.to_height) or request.to_height < 0:
        raise ResizeValidationError("to_height must be non-negative integer")

    filter_config = get_filter(request.filter)

    if not _is_number(request.unsharp_amount) or request.unsharp_amount < 0:
        raise ResizeValidationError("unsharp_amount must be >= 0")
    if not _is_number(request.unsharp_radius) or request.unsharp_radius < 0:
        raise ResizeValidationError("unsharp_radius must be >= 0")
    if not _is_number(request.unsharp_threshold) or not (
        0 <= request.unsharp_threshold <= 255
    ):
        raise ResizeValidationError("unsharp_threshold must be 0-255")

    source = PixelBuffer.from_array(
        request.src, int(request.width), int(request.height), "src"
    )
    to_width = int(request.to_width)
    to_height = int(request.to_height)

    dest = request.dest
    if dest is not None and to_width > 0 and to_height > 0:
        if not isinstance(dest, np.ndarray):
            raise ResizeValidationError("dest must be a numpy array")
        if dest.size != buffer_length(to_width, to_height):
            raise ResizeValidationError(
                f"dest length mismatch: got {dest.size}, expected "
                f"{buffer_length(to_width, to_height)}"
            )
        if source.is_linear and not np.issubdtype(dest.dtype, np.floating):
            raise ResizeValidationError("dest must be a floating point buffer for float sources")
        if not source.is_linear and dest.dtype != np.uint8:
            raise ResizeValidationError("dest must be a uint8 buffer for byte sources")
        if not dest.flags.writeable:
            raise ResizeValidationError("dest must be writeable")

    return ValidRequest(
        source=source,
        to_width=to_width,
        to_height=to_height,
        filter_config=filter_config,
        unsharp_amount=float(request.unsharp_amount),
        unsharp_radius=float(request.unsharp_radius),
        unsharp_threshold=float(request.unsharp_threshold),
        gamma_correct=bool(request.gamma_correct),
        dest=dest,
    )


def write_result(result: np.ndarray, dest):
    """Copy ``result`` into ``dest`` when one was supplied, else return ``result``."""
    if dest is None:
        return result
    np.copyto(dest, result.reshape(dest.shape), casting="unsafe")
    return dest


__all__ = ["ResizeRequest", "ValidRequest", "validate_request", "write_result"]
