#!/usr/bin/env python3
"""
Test runner for PyFastScale.

    python run_tests.py                # imports + unit tests
    python run_tests.py all --fast     # every suite, slow tests excluded
    python run_tests.py unit --no-taichi --coverage
"""
import argparse
import subprocess
import sys

SUITES = {
    "basic": ["tests/test_imports.py", "tests/unit/"],
    "imports": ["tests/test_imports.py"],
    "unit": ["tests/unit/"],
    "integration": ["tests/integration/"],
    "all": ["tests/"],
}


def pytest_args(suite, fast=False, no_taichi=False, verbose=False, coverage=False):
    """pytest command line for a suite; --fast and --no-taichi combine into one -m expression."""
    args = [sys.executable, "-m", "pytest", "-v" if verbose else "-q", "--disable-warnings"]
    markers = []
    if fast:
        markers.append("not slow")
    if no_taichi:
        markers.append("not gpu")
    if markers:
        args += ["-m", " and ".join(markers)]
    if coverage:
        args += ["--cov=pyfastscale", "--cov-report=term"]
    return args + SUITES[suite]


def main():
    parser = argparse.ArgumentParser(description="PyFastScale test runner")
    parser.add_argument("suite", nargs="?", default="basic", choices=sorted(SUITES))
    parser.add_argument("--fast", action="store_true", help="Exclude slow tests")
    parser.add_argument("--no-taichi", action="store_true",
                        help="Exclude tests running Taichi kernels")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--coverage", action="store_true")
    args = parser.parse_args()

    cmd = pytest_args(args.suite, args.fast, args.no_taichi, args.verbose, args.coverage)
    print(f"→ {' '.join(cmd)}")
    return subprocess.run(cmd).returncode


if __name__ == "__main__":
    sys.exit(main())
