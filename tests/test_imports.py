"""
Import tests for all PyFastScale modules and submodules.

These tests ensure that all modules can be imported without errors,
which is crucial for detecting import-related issues early.

Tests are marked with @pytest.mark.importtest for selective running.
"""
import pytest


class TestMainPackageImports:
    """Test imports for the main pyfastscale package."""

    @pytest.mark.importtest
    def test_main_package_import(self):
        """Test that the main pyfastscale package can be imported."""
        import pyfastscale
        assert hasattr(pyfastscale, '__version__')
        assert callable(pyfastscale.resize)
        assert pyfastscale.ResizeEngine is not None

    @pytest.mark.importtest
    def test_constants_import(self):
        """Test that constants module can be imported."""
        import pyfastscale.constants
        assert pyfastscale.constants.WEIGHT_EPSILON == 1e-6

    @pytest.mark.importtest
    def test_errors_import(self):
        """Validation errors are ValueErrors, backend errors RuntimeErrors."""
        from pyfastscale.errors import (
            BackendError,
            GPUBackendError,
            ResizeValidationError,
        )
        assert issubclass(ResizeValidationError, ValueError)
        assert issubclass(GPUBackendError, BackendError)
        assert issubclass(BackendError, RuntimeError)

    @pytest.mark.importtest
    def test_logger_import(self):
        """Test logger module import."""
        import pyfastscale.logger
        assert pyfastscale.logger.log.name == "pyfastscale"


class TestCLIImports:
    """Test imports for CLI modules."""

    @pytest.mark.importtest
    def test_cli_init_import(self):
        """Test CLI package import."""
        import pyfastscale.cli
        assert "resize_image" in pyfastscale.cli.__all__

    @pytest.mark.importtest
    def test_cli_resize_commands_import(self):
        """Test resize commands module import."""
        import pyfastscale.cli.resize_commands
        assert hasattr(pyfastscale.cli.resize_commands, 'resize_image')
        assert hasattr(pyfastscale.cli.resize_commands, 'list_filters')

    @pytest.mark.importtest
    def test_cli_lazy_attribute(self):
        """Commands resolve lazily through the package."""
        import pyfastscale.cli
        assert callable(pyfastscale.cli.list_filters)
        with pytest.raises(AttributeError):
            pyfastscale.cli.not_a_command


class TestCoreImports:
    """Test imports for the processing modules."""

    @pytest.mark.importtest
    def test_filters_import(self):
        import pyfastscale.filters
        assert hasattr(pyfastscale.filters, 'weight')
        assert hasattr(pyfastscale.filters, 'GaussianKernelCache')

    @pytest.mark.importtest
    def test_color_import(self):
        import pyfastscale.color
        assert hasattr(pyfastscale.color, 'to_linear')
        assert hasattr(pyfastscale.color, 'to_srgb')

    @pytest.mark.importtest
    def test_rastermanip_import(self):
        import pyfastscale.rastermanip
        assert hasattr(pyfastscale.rastermanip, 'CPUResizer')
        assert hasattr(pyfastscale.rastermanip, 'ContributionCache')

    @pytest.mark.importtest
    def test_pool_import(self):
        import pyfastscale.pool
        assert hasattr(pyfastscale.pool, 'TaiPool')

    @pytest.mark.importtest
    def test_gpu_import(self):
        import pyfastscale.gpu
        assert hasattr(pyfastscale.gpu, 'TaichiResizer')
        assert hasattr(pyfastscale.gpu, 'resize_pass_kernel')

    @pytest.mark.importtest
    def test_dispatch_import(self):
        import pyfastscale.dispatch
        assert hasattr(pyfastscale.dispatch, 'ResizeEngine')

    @pytest.mark.importtest
    def test_worker_import(self):
        import pyfastscale.worker
        assert hasattr(pyfastscale.worker, 'ScalerWorker')
        assert hasattr(pyfastscale.worker, 'BufferHandle')

    @pytest.mark.importtest
    def test_misc_import(self):
        import pyfastscale.misc
        assert hasattr(pyfastscale.misc, 'load_image_rgba')


@pytest.mark.importtest
def test_all_public_modules_importable():
    """Every submodule listed in __all__ is importable."""
    import importlib
    import pyfastscale

    for name in ["color", "constants", "dispatch", "filters", "gpu",
                 "misc", "pool", "rastermanip", "worker"]:
        module = importlib.import_module(f"pyfastscale.{name}")
        assert module is getattr(pyfastscale, name)
