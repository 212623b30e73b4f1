"""
Test suite for PyFastScale package.

This test suite covers:
- Import tests for all modules and submodules
- Unit tests for filters, resampling, the GPU backend, dispatch, worker and CLI
- Integration tests for complete workflows

Run with: pytest
"""
