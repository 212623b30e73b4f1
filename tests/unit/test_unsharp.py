"""Unit tests for the Gaussian blur and unsharp mask."""

import numpy as np
import pytest

from pyfastscale.errors import ResizeValidationError
from pyfastscale.filters import GaussianKernelCache
from pyfastscale.rastermanip import blur, unsharp
from pyfastscale.rastermanip.unsharp import reflect_indices


def _edge_row(width=8, dark=50, bright=200):
    """One row, left half dark, right half bright, opaque."""
    px = np.zeros((width, 4), dtype=np.uint8)
    px[: width // 2, :3] = dark
    px[width // 2:, :3] = bright
    px[:, 3] = 255
    return px.reshape(-1)


@pytest.mark.unit
def test_reflect_indices():
    assert reflect_indices(np.array([-2, -1, 0, 4, 5, 6]), 5).tolist() == [2, 1, 0, 4, 4, 3]
    # narrower than the kernel: reflection lands outside, clamp keeps it valid
    assert reflect_indices(np.array([-3, 3]), 1).tolist() == [0, 0]


@pytest.mark.unit
def test_blur_keeps_solid_colour(test_data_manager):
    src = test_data_manager.solid(6, 5, (10, 20, 30, 40))
    out = blur(src, 6, 5, 1.5)
    assert np.array_equal(out, src)


@pytest.mark.unit
def test_blur_softens_edges():
    src = _edge_row()
    out = blur(src, 8, 1, 1.0).reshape(-1, 4)
    assert 50 < out[3, 0] < 200
    assert 50 < out[4, 0] < 200
    assert np.all(out[:, 3] == 255)


@pytest.mark.unit
def test_blur_checks_length():
    with pytest.raises(ResizeValidationError):
        blur(np.zeros(10, dtype=np.uint8), 2, 2, 1.0)


@pytest.mark.unit
def test_unsharp_increases_edge_contrast():
    src = _edge_row()
    out = unsharp(src, 8, 1, amount=100, radius=1.0, threshold=0).reshape(-1, 4)
    assert out[3, 0] < 50
    assert out[4, 0] > 200
    # far from the edge nothing changes
    assert out[0, 0] == 50
    assert np.all(out[:, 3] == 255)


@pytest.mark.unit
def test_threshold_suppresses_small_differences():
    src = _edge_row(dark=100, bright=104)
    out = unsharp(src, 8, 1, amount=500, radius=1.0, threshold=10)
    assert np.array_equal(out, src)


@pytest.mark.unit
def test_alpha_passthrough(random_rgba):
    src, w, h = random_rgba
    out = unsharp(src, w, h, amount=150, radius=1.2, threshold=0)
    assert np.array_equal(out.reshape(-1, 4)[:, 3], src.reshape(-1, 4)[:, 3])


@pytest.mark.unit
def test_radius_is_capped_for_the_blur():
    kernels = GaussianKernelCache()
    unsharp(_edge_row(), 8, 1, amount=50, radius=9.0, threshold=0, kernels=kernels)
    assert 2.0 in kernels
    assert len(kernels) == 1


@pytest.mark.unit
def test_small_radius_blurs_with_minimum_sigma():
    kernels = GaussianKernelCache()
    blur(_edge_row(), 8, 1, 0.1, kernels=kernels)
    assert 0.5 in kernels
