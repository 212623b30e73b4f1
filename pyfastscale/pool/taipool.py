"""
Taichi field pool.

GPU passes need short-lived fields of a handful of shapes. Allocating them
through ti.FieldsBuilder lets the pool reuse released fields of the same
(dtype, shape, channels) and destroy the underlying SNode trees, which
returns the device memory. At most ``max_free`` released fields are kept;
older ones are destroyed on release and everything goes on clear(). Taichi
caps the number of live SNode trees, so an unbounded pool would eventually
crash the runtime.

Usage:
    pool = TaiPool()
    tmp = pool.get_tpfield(dtype=ti.f32, shape=(nx * ny,), n=4)
    kernel(tmp.field)
    tmp.release()
    pool.stats()
"""

from collections import defaultdict

import taichi as ti

from .. import constants as cte

_AXES = {1: ti.i, 2: ti.ij, 3: ti.ijk}


def _normalize_shape(shape):
    if isinstance(shape, int):
        return (shape,)
    return tuple(int(s) for s in shape)


class TPField:
    """A pooled Taichi field. Call release() to hand it back to its pool."""

    def __init__(self, pool, key, field, tree):
        self._pool = pool
        self.key = key
        self.field = field
        self.tree = tree
        self.in_use = False

    @property
    def shape(self):
        return self.key[1]

    def release(self):
        if self.in_use:
            self._pool._release(self)

    def __repr__(self):
        dtype, shape, n = self.key
        return f"TPField(dtype={dtype}, shape={shape}, n={n}, in_use={self.in_use})"

class TaiPool:
    """
    Pool of Taichi fields keyed by (dtype, shape, channels).

    Args:
        max_free: Number of released fields kept for reuse. Releasing one
            more destroys the SNode tree of the least recently released
            field, so a pool serving many distinct sizes stays bounded.
    """

    def __init__(self, max_free: int = cte.DEFAULT_POOL_MAX_FREE):
        if max_free < 0:
            raise ValueError("max_free must be >= 0")
        self.max_free = int(max_free)
        self._free = defaultdict(list)
        self._released = []
        self._fields = []

    def get_tpfield(self, dtype, shape, n: int = 1) -> TPField:
        """
        Take a field from the pool, allocating one if none is free.

        Args:
            dtype: Taichi dtype (ti.f32, ti.i32, ...)
            shape: int or tuple, at most 3 dimensions
            n: Number of vector components (1 for a scalar field)

        Returns:
            TPField: Field marked in use until released
        """
        shape = _normalize_shape(shape)
        if len(shape) not in _AXES:
            raise ValueError(f"shape must have 1 to 3 dimensions, got {shape}")
        key = (dtype, shape, n)
        free = self._free[key]
        if free:
            tpf = free.pop()
            self._released.remove(tpf)
        else:
            tpf = self._allocate(key)
        tpf.in_use = True
        return tpf

    def _allocate(self, key):
        dtype, shape, n = key
        fb = ti.FieldsBuilder()
        if n == 1:
            field = ti.field(dtype=dtype)
        else:
            field = ti.Vector.field(n, dtype=dtype)
        fb.dense(_AXES[len(shape)], shape).place(field)
        tree = fb.finalize()
        tpf = TPField(self, key, field, tree)
        self._fields.append(tpf)
        return tpf

    def _release(self, tpf):
        tpf.in_use = False
        self._free[tpf.key].append(tpf)
        self._released.append(tpf)
        while len(self._released) > self.max_free:
            self._destroy(self._released.pop(0))

    def _destroy(self, tpf):
        free = self._free[tpf.key]
        free.remove(tpf)
        if not free:
            del self._free[tpf.key]
        self._fields.remove(tpf)
        tpf.tree.destroy()

    def in_use(self) -> int:
        return sum(1 for f in self._fields if f.in_use)

    def stats(self):
        return {
            "total": len(self._fields),
            "in_use": self.in_use(),
            "free": len(self._fields) - self.in_use(),
        }

    def clear(self):
        """Destroy every pooled field, released or not."""
        for tpf in self._fields:
            tpf.tree.destroy()
            tpf.in_use = False
        self._fields.clear()
        self._free.clear()
        self._released.clear()

    def __repr__(self):
        return f"TaiPool({self.stats()})"


__all__ = ["TaiPool", "TPField"]
