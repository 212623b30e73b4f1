"""
Backend dispatch.

ResizeEngine tries the GPU backend first when it is available and falls back
to the CPU resizer on any recoverable backend failure.
"""

from .engine import ResizeBackend, ResizeEngine

__all__ = ["ResizeBackend", "ResizeEngine"]
