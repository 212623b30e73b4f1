"""
Exception types raised by PyFastScale.

Validation errors are fatal for a request. Backend errors are recoverable:
the dispatcher catches them and moves on to the next backend in its chain.
"""


class ResizeValidationError(ValueError):
    """A resize request or buffer failed validation."""


class BackendError(RuntimeError):
    """A resize backend failed while processing a valid request."""

    def __init__(self, message, backend=None):
        super().__init__(message)
        self.backend = backend


class GPUBackendError(BackendError):
    """The GPU path is unavailable or failed during execution."""


class BufferMovedError(RuntimeError):
    """A buffer handle was used after its content was transferred."""


__all__ = [
    "ResizeValidationError",
    "BackendError",
    "GPUBackendError",
    "BufferMovedError",
]
