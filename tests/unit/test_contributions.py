"""Unit tests for contribution tables and their cache."""

import numpy as np
import pytest

from pyfastscale.filters import FILTERS, FilterConfig, get_filter
from pyfastscale.rastermanip import (
    ContributionCache,
    compute_contributions,
    effective_support,
)

SCALES = [0.01, 0.05, 0.1, 0.33, 0.5, 0.75, 1.0, 1.5, 2.0, 3.7, 10.0, 100.0]


def _sizes(scale):
    src_size = 200 if scale < 1 else 3
    dest_size = max(1, int(round(src_size * scale)))
    return dest_size, src_size, dest_size / src_size


class TestNormalisation:
    """Every entry's weights sum to 1."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", sorted(FILTERS))
    @pytest.mark.parametrize("scale", SCALES)
    def test_weights_sum_to_one(self, name, scale):
        cfg = get_filter(name)
        dest_size, src_size, actual = _sizes(scale)
        table = compute_contributions(
            dest_size, src_size, actual, effective_support(cfg, actual), cfg
        )
        assert len(table) == dest_size
        for entry in table:
            assert len(entry) >= 1
            assert entry.weights.sum() == pytest.approx(1.0, abs=1e-9)
            assert entry.indices.min() >= 0
            assert entry.indices.max() <= src_size - 1

    @pytest.mark.unit
    def test_dense_matrix_matches_entries(self):
        cfg = get_filter("lanczos3")
        table = compute_contributions(7, 20, 0.35, effective_support(cfg, 0.35), cfg)
        assert table.weight_matrix.shape == (7, table.taps)
        assert np.allclose(table.weight_matrix.sum(axis=1), 1.0)
        assert not table.weight_matrix.flags.writeable
        for d, entry in enumerate(table):
            n = len(entry)
            assert table.index_matrix[d, :n].tolist() == entry.indices.tolist()
            assert np.all(table.weight_matrix[d, n:] == 0)


class TestKnownTables:
    """Hand computed tables."""

    @pytest.mark.unit
    def test_box_halving(self):
        cfg = get_filter("box")
        table = compute_contributions(2, 4, 0.5, effective_support(cfg, 0.5), cfg)
        assert table[0].pairs() == [(0, 0.5), (1, 0.5)]
        assert table[1].pairs() == [(2, 0.5), (3, 0.5)]

    @pytest.mark.unit
    def test_support_scaled_only_when_downscaling(self):
        cfg = get_filter("lanczos3")
        assert effective_support(cfg, 0.5) == 6.0
        assert effective_support(cfg, 1.0) == 3.0
        assert effective_support(cfg, 2.0) == 3.0


class TestDegenerateFallback:
    """Numerically zero weight sums fall back to the nearest source sample."""

    ZERO = FilterConfig("zero", 1.0, 1.0, lambda x: 0.0, "always zero")

    @pytest.mark.unit
    def test_single_entry_with_unit_weight(self):
        table = compute_contributions(4, 8, 0.5, 2.0, self.ZERO)
        for entry in table:
            assert len(entry) == 1
            assert entry.weights.tolist() == [1.0]
        # round_half_up(center - 0.5) with center = (d + 0.5) / 0.5
        assert [entry.indices[0] for entry in table] == [1, 3, 5, 7]

    @pytest.mark.unit
    def test_index_is_clamped(self):
        # scale deliberately inconsistent with the sizes pushes centres past the source
        table = compute_contributions(4, 2, 0.5, 1.0, self.ZERO)
        assert [entry.indices[0] for entry in table] == [1, 1, 1, 1]


class TestContributionCache:
    """Memoisation and explicit clearing."""

    @pytest.mark.unit
    def test_same_key_same_table(self):
        cache = ContributionCache()
        cfg = get_filter("hamming")
        a = cache.calculate(10, 20, 0.5, 2.0, cfg)
        b = cache.calculate(10, 20, 0.50000001, 2.0, cfg)
        assert a is b
        assert len(cache) == 1

    @pytest.mark.unit
    def test_filters_with_equal_support_do_not_collide(self):
        cache = ContributionCache()
        a = cache.calculate(5, 10, 0.5, 4.0, get_filter("lanczos2"))
        b = cache.calculate(5, 10, 0.5, 4.0, get_filter("bicubic"))
        assert a is not b
        assert len(cache) == 2
        assert a[0].weights.tolist() != b[0].weights.tolist()

    @pytest.mark.unit
    def test_clear(self):
        cache = ContributionCache()
        cache.calculate(3, 6, 0.5, 1.0, get_filter("box"))
        cache.clear_cache()
        assert len(cache) == 0

    @pytest.mark.unit
    def test_caches_are_independent(self):
        first, second = ContributionCache(), ContributionCache()
        first.calculate(3, 6, 0.5, 1.0, get_filter("box"))
        assert len(second) == 0
