"""Shared test fixtures for Caldera."""

import random
import tempfile
from pathlib import Path

import pytest

from caldera.core import Dimensions, StateDefinition, StateTable, StateName


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        # --run-slow given: don't skip slow tests
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="caldera_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(12345)


@pytest.fixture
def small_dimensions() -> Dimensions:
    return Dimensions(4, 3, 2)


@pytest.fixture
def uniform_states() -> StateTable:
    """Two equally likely states that never influence each other."""
    return StateTable([
        StateDefinition(StateName("ground"), lambda d, p: 1.0),
        StateDefinition(StateName("sky"), lambda d, p: 1.0),
    ])
