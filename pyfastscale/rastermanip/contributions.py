"""
Per-axis contribution tables for separable resampling.

For one axis, a contribution table lists, for every destination sample, the
source samples that feed it and their normalised weights. Tables depend only on
the sizes, the scale, the effective support and the filter, so they are
memoised in a ContributionCache that the owning resizer keeps for its lifetime.

Algorithm for destination index d:
1. center = (d + 0.5) / scale
2. start = max(0, floor(center - support)), end = min(src_size - 1, ceil(center + support))
3. w = filter((center - s - 0.5) * scale) for s in [start, end], kept if |w| > 1e-6
4. normalise by the weight sum, or fall back to the nearest source sample with
   weight 1 when that sum is numerically zero
"""

import math
from dataclasses import dataclass

import numpy as np

from .. import constants as cte
from ..filters import FilterConfig


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Contribution:
    """Source indices and normalised weights feeding one destination sample."""

    indices: np.ndarray
    weights: np.ndarray

    def pairs(self):
        return list(zip(self.indices.tolist(), self.weights.tolist()))

    def __len__(self):
        return len(self.indices)


class ContributionTable:
    """
    Ordered contributions for every destination index of one axis.

    Besides the per-entry view, the table keeps a dense (dest_size, taps)
    index/weight matrix padded with zero weights, which the separable passes
    consume one tap column at a time.
    """

    def __init__(self, entries):
        self.entries = list(entries)
        taps = max((len(e) for e in self.entries), default=0)
        self.index_matrix = np.zeros((len(self.entries), taps), dtype=np.intp)
        self.weight_matrix = np.zeros((len(self.entries), taps), dtype=np.float64)
        for d, entry in enumerate(self.entries):
            n = len(entry)
            self.index_matrix[d, :n] = entry.indices
            self.weight_matrix[d, :n] = entry.weights
        self.index_matrix.setflags(write=False)
        self.weight_matrix.setflags(write=False)

    @property
    def taps(self) -> int:
        return self.index_matrix.shape[1]

    def __len__(self):
        return len(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    def __iter__(self):
        return iter(self.entries)


def compute_contributions(
    dest_size: int,
    src_size: int,
    scale: float,
    support: float,
    filter_config: FilterConfig,
) -> ContributionTable:
    """
    Compute a contribution table without caching.

    Args:
        dest_size: Number of destination samples along the axis
        src_size: Number of source samples along the axis
        scale: dest_size / src_size
        support: Effective filter half-width in source samples
        filter_config: Filter providing the weight function

    Returns:
        ContributionTable: One entry per destination index, weights summing to 1
    """
    entries = []
    for dest_index in range(dest_size):
        center = (dest_index + 0.5) / scale
        start = max(0, int(math.floor(center - support)))
        end = min(src_size - 1, int(math.ceil(center + support)))

        indices = []
        weights = []
        for src_index in range(start, end + 1):
            w = filter_config.weight((center - src_index - 0.5) * scale)
            if abs(w) > cte.WEIGHT_EPSILON:
                indices.append(src_index)
                weights.append(w)

        weight_sum = math.fsum(weights)
        if abs(weight_sum) > cte.WEIGHT_EPSILON:
            weights = [w / weight_sum for w in weights]
        else:
            nearest = min(src_size - 1, max(0, _round_half_up(center - 0.5)))
            indices = [nearest]
            weights = [1.0]

        entries.append(
            Contribution(
                np.asarray(indices, dtype=np.intp),
                np.asarray(weights, dtype=np.float64),
            )
        )
    return ContributionTable(entries)


class ContributionCache:
    """
    Memoised contribution tables.

    The cache has no eviction policy: it grows with every distinct
    (sizes, scale, support, filter) combination until clear() is called.
    """

    def __init__(self):
        self._cache = {}

    @staticmethod
    def key(dest_size, src_size, scale, support, filter_config):
        return (
            int(dest_size),
            int(src_size),
            round(scale, cte.SCALE_KEY_DIGITS),
            round(support, cte.SCALE_KEY_DIGITS),
            filter_config.name,
        )

    def calculate(self, dest_size, src_size, scale, support, filter_config):
        key = self.key(dest_size, src_size, scale, support, filter_config)
        table = self._cache.get(key)
        if table is None:
            table = compute_contributions(dest_size, src_size, scale, support, filter_config)
            self._cache[key] = table
        return table

    def clear(self):
        self._cache.clear()

    clear_cache = clear

    def __len__(self):
        return len(self._cache)


def effective_support(filter_config: FilterConfig, scale: float) -> float:
    """Widen the filter support by 1/scale when downscaling, never when upscaling."""
    if scale < 1.0:
        return filter_config.support / scale
    return filter_config.support


__all__ = [
    "Contribution",
    "ContributionTable",
    "ContributionCache",
    "compute_contributions",
    "effective_support",
]
