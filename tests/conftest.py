"""
Pytest configuration and fixtures for PyFastScale test suite.

This file contains shared fixtures, test configuration, and utilities
used across the test suite.
"""
import os
import sys
import pytest
import numpy as np


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add the package root to Python path for testing
    package_root = os.path.dirname(os.path.dirname(__file__))
    if package_root not in sys.path:
        sys.path.insert(0, package_root)

    for marker, description in [
        ("unit", "fast isolated tests"),
        ("integration", "end to end workflows"),
        ("importtest", "module import checks"),
        ("gpu", "runs Taichi kernels (on the cpu arch)"),
        ("slow", "long running tests"),
    ]:
        config.addinivalue_line("markers", f"{marker}: {description}")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers and ordering."""
    for item in items:
        # Taichi kernel compilation dominates these
        if "gpu" in item.keywords:
            item.add_marker("slow")

        # Mark import tests for easy selection
        if "import" in item.name.lower() or "test_imports.py" in str(item.fspath):
            item.add_marker("importtest")


@pytest.fixture(scope="session")
def taichi_cpu():
    """Initialise Taichi once per session on the cpu arch, or skip."""
    try:
        import taichi as ti
        ti.init(arch=ti.cpu, offline_cache=False)
    except Exception as e:
        pytest.skip(f"Taichi not available or initialization failed: {e}")
    return ti


@pytest.fixture
def taichi_resizer(taichi_cpu):
    """A TaichiResizer running its kernels on the Taichi cpu arch."""
    from pyfastscale.gpu import TaichiResizer

    resizer = TaichiResizer(arch="cpu", initialize=False)
    assert resizer.available(), resizer.probe_error
    yield resizer
    resizer.clear_caches()


class TestDataManager:
    """Helper class for building RGBA test buffers."""

    @staticmethod
    def solid(width, height, rgba=(100, 150, 200, 255)):
        """Flat uint8 buffer filled with one colour."""
        return np.tile(np.asarray(rgba, dtype=np.uint8), width * height)

    @staticmethod
    def random(width, height, seed=42):
        """Reproducible random uint8 RGBA buffer."""
        rng = np.random.default_rng(seed)
        return rng.integers(0, 256, size=width * height * 4, dtype=np.uint8)

    @staticmethod
    def gradient(width, height):
        """Smooth horizontal/vertical gradient with opaque alpha."""
        x = np.linspace(0, 255, width)
        y = np.linspace(0, 255, height)
        X, Y = np.meshgrid(x, y)
        img = np.empty((height, width, 4), dtype=np.uint8)
        img[..., 0] = X.astype(np.uint8)
        img[..., 1] = Y.astype(np.uint8)
        img[..., 2] = ((X + Y) / 2).astype(np.uint8)
        img[..., 3] = 255
        return img.reshape(-1)

    @staticmethod
    def request(src, width, height, to_width, to_height, **options):
        """Request mapping with the direct call field names."""
        request = {
            "src": src,
            "width": width,
            "height": height,
            "to_width": to_width,
            "to_height": to_height,
        }
        request.update(options)
        return request


@pytest.fixture
def test_data_manager():
    """Provide access to test data creation utilities."""
    return TestDataManager()


@pytest.fixture(scope="session")
def solid_4x4():
    """The 4x4 (100, 150, 200, 255) reference image."""
    return TestDataManager.solid(4, 4)


@pytest.fixture(scope="session")
def random_rgba():
    """Random 37x23 RGBA image for parity and regression checks."""
    return TestDataManager.random(37, 23), 37, 23
