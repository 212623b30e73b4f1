"""
Pixel buffer model for PyFastScale.

A pixel buffer is a flat, row-major array of interleaved RGBA samples. It comes
in two kinds: BYTE (uint8, 0..255, gamma encoded) and FLOAT (float32, linear
light). The kind is resolved once, when a caller's array crosses the public API,
and from then on passes receive an explicit ``is_linear`` flag.
"""

import enum
from dataclasses import dataclass

import numpy as np

from .. import constants as cte
from ..errors import ResizeValidationError


class BufferKind(enum.Enum):
    BYTE = "byte"
    FLOAT = "float"

    @property
    def dtype(self):
        return np.uint8 if self is BufferKind.BYTE else cte.FLOAT_TYPE_NP

    @property
    def is_linear(self) -> bool:
        return self is BufferKind.FLOAT


def buffer_length(width: int, height: int) -> int:
    return width * height * cte.CHANNELS


def check_buffer_length(data, width: int, height: int, name: str = "buffer"):
    """Raise ResizeValidationError unless ``len(data) == width * height * 4``."""
    expected = buffer_length(width, height)
    if len(data) != expected:
        raise ResizeValidationError(
            f"{name} length mismatch: got {len(data)}, expected {expected} "
            f"for {width}x{height} RGBA"
        )


def allocate(width: int, height: int, is_linear: bool) -> np.ndarray:
    """Allocate a zeroed buffer of the working representation."""
    dtype = cte.FLOAT_TYPE_NP if is_linear else np.uint8
    return np.zeros(buffer_length(width, height), dtype=dtype)


def as_pixel_array(src, name: str = "src") -> np.ndarray:
    """
    Convert a caller supplied buffer to a flat uint8 or float32 array.

    Accepts numpy arrays of uint8 or any floating dtype, and bytes-like
    objects (viewed as uint8 without copying).

    Raises:
        ResizeValidationError: If ``src`` is not a supported pixel buffer
    """
    if isinstance(src, np.ndarray):
        if src.dtype == np.uint8:
            return src.reshape(-1)
        if np.issubdtype(src.dtype, np.floating):
            return src.reshape(-1).astype(cte.FLOAT_TYPE_NP, copy=False)
        raise ResizeValidationError(
            f"{name} must be a uint8 or floating point buffer, got dtype {src.dtype}"
        )
    if isinstance(src, (bytes, bytearray, memoryview)):
        return np.frombuffer(src, dtype=np.uint8)
    raise ResizeValidationError(
        f"{name} must be a numpy array or bytes-like buffer, got {type(src).__name__}"
    )


@dataclass(frozen=True)
class PixelBuffer:
    """Tagged pixel buffer: flat data, dimensions and representation."""

    data: np.ndarray
    width: int
    height: int
    kind: BufferKind

    @classmethod
    def from_array(cls, src, width: int, height: int, name: str = "src"):
        data = as_pixel_array(src, name)
        kind = BufferKind.BYTE if data.dtype == np.uint8 else BufferKind.FLOAT
        check_buffer_length(data, width, height, name)
        return cls(data, width, height, kind)

    @property
    def is_linear(self) -> bool:
        return self.kind.is_linear

    def __len__(self):
        return len(self.data)


__all__ = [
    "BufferKind",
    "PixelBuffer",
    "allocate",
    "as_pixel_array",
    "buffer_length",
    "check_buffer_length",
]
