"""Shared fixtures: artifact output and the double precision engine thresholds"""

import os
from pathlib import Path

import pytest

from zbessel.amos.machine import WorkingPrecision


@pytest.fixture
def artifacts_dir(request: pytest.FixtureRequest) -> Path:
    """Directory for storing test artifacts.

    Creates a "test_artifacts" directory in the current working directory and returns
    a Path pointing to a subdirectory for the current test module, e.g. the
    difference plots of test_bessel.py land in test_artifacts/test_bessel.
    """
    testpath = str(request.path.relative_to(Path(__file__).parent))
    testpath = testpath.removesuffix(".py")
    out = Path(os.getcwd()) / "test_artifacts" / testpath
    out.mkdir(parents=True, exist_ok=True)
    return out


@pytest.fixture
def wp() -> WorkingPrecision:
    """Thresholds the public functions use, derived from float64"""
    return WorkingPrecision.from_machine()
