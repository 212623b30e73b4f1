"""Unit tests for reconstruction filters and Gaussian kernels."""

import numpy as np
import pytest

from pyfastscale.errors import ResizeValidationError
from pyfastscale.filters import (
    FILTER_INDEX,
    FILTERS,
    GaussianKernelCache,
    gaussian_kernel,
    get_filter,
    get_filter_info,
    weight,
)


class TestFilterWeights:
    """Filter values at known points."""

    @pytest.mark.unit
    def test_box(self):
        assert weight("box", 0.0) == 1.0
        assert weight("box", 0.5) == 1.0
        assert weight("box", -0.5) == 1.0
        assert weight("box", 0.51) == 0.0

    @pytest.mark.unit
    def test_hamming(self):
        assert weight("hamming", 0.0) == pytest.approx(1.0)
        assert weight("hamming", 0.5) == pytest.approx(0.54)
        assert weight("hamming", 1.0) == 0.0

    @pytest.mark.unit
    @pytest.mark.parametrize("name,lobes", [("lanczos2", 2), ("lanczos3", 3)])
    def test_lanczos_zero_crossings(self, name, lobes):
        assert weight(name, 0.0) == 1.0
        for k in range(1, lobes):
            assert abs(weight(name, float(k))) < 1e-12
        assert weight(name, float(lobes)) == 0.0
        assert weight(name, lobes + 0.5) == 0.0

    @pytest.mark.unit
    def test_mitchell(self):
        assert weight("mks2013", 0.0) == pytest.approx(16.0 / 18.0)
        assert weight("mks2013", 1.0) == pytest.approx(1.0 / 18.0)
        assert weight("mks2013", 2.0) == 0.0

    @pytest.mark.unit
    def test_bicubic(self):
        assert weight("bicubic", 0.0) == 1.0
        assert weight("bicubic", 1.0) == pytest.approx(0.0)
        assert weight("bicubic", 1.5) == pytest.approx(-0.0625)
        assert weight("bicubic", 2.0) == 0.0

    @pytest.mark.unit
    @pytest.mark.parametrize("name", sorted(FILTERS))
    def test_symmetric_and_bounded(self, name):
        cfg = get_filter(name)
        for x in np.linspace(0, cfg.support + 1, 41):
            assert cfg.weight(x) == pytest.approx(cfg.weight(-x))
        assert cfg.weight(cfg.support + 1.0) == 0.0


class TestFilterTable:
    """Registry lookups."""

    @pytest.mark.unit
    def test_supports_and_factors(self):
        expected = {
            "box": (0.5, 1.0),
            "hamming": (1.0, 1.0),
            "lanczos2": (2.0, 2.0),
            "lanczos3": (3.0, 3.0),
            "mks2013": (2.0, 1.0),
            "bicubic": (2.0, 2.0),
        }
        for name, (support, factor) in expected.items():
            cfg = get_filter(name)
            assert (cfg.support, cfg.factor) == (support, factor)

    @pytest.mark.unit
    def test_unknown_filter(self):
        with pytest.raises(ResizeValidationError, match="unsupported filter"):
            get_filter("nearest")
        with pytest.raises(ResizeValidationError):
            weight("gaussian", 0.0)

    @pytest.mark.unit
    def test_filter_info(self):
        info = get_filter_info()
        assert set(info) == set(FILTERS)
        assert info["lanczos3"]["support"] == 3.0
        assert all(entry["description"] for entry in info.values())

    @pytest.mark.unit
    def test_gpu_ids_cover_every_filter(self):
        assert set(FILTER_INDEX) == set(FILTERS)
        assert len(set(FILTER_INDEX.values())) == len(FILTERS)


class TestGaussianKernels:
    """Gaussian kernel construction and caching."""

    @pytest.mark.unit
    @pytest.mark.parametrize("sigma", [0.5, 1.0, 1.3, 2.0])
    def test_kernel_shape_and_sum(self, sigma):
        kernel = gaussian_kernel(sigma)
        radius = int(np.ceil(3 * sigma))
        assert len(kernel) == 2 * radius + 1
        assert kernel.dtype == np.float32
        assert kernel.sum() == pytest.approx(1.0, abs=1e-6)
        assert np.allclose(kernel, kernel[::-1])
        assert np.argmax(kernel) == radius

    @pytest.mark.unit
    def test_zero_sigma_is_identity(self):
        assert gaussian_kernel(0.0).tolist() == [1.0]

    @pytest.mark.unit
    def test_cache_quantises_sigma(self):
        cache = GaussianKernelCache()
        a = cache.create(0.5)
        b = cache.create(0.501)
        assert a is b
        assert len(cache) == 1
        assert 0.5 in cache
        cache.create(0.75)
        assert len(cache) == 2

    @pytest.mark.unit
    def test_cached_kernels_are_read_only(self):
        kernel = GaussianKernelCache().create(1.0)
        assert not kernel.flags.writeable

    @pytest.mark.unit
    def test_clear(self):
        cache = GaussianKernelCache()
        cache.create(1.0)
        cache.clear_cache()
        assert len(cache) == 0
