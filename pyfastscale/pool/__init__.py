"""
Memory pool for Taichi fields used by the GPU resize path.

Every GPU resizer owns one TaiPool; fields taken during a request are released
before the request returns, on success or failure.
"""

from .taipool import TaiPool, TPField

__all__ = ["TaiPool", "TPField"]
