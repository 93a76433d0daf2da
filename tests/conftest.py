"""
Pytest configuration and shared fixtures.
"""

import random

import pytest

from src.analytics.config import AnalyticsConfig
from src.simulator.config import SimulatorConfig
from src.simulator.models import MetricBounds
from tests.helpers import FixedClock, make_series


# Time series fixtures
@pytest.fixture
def series_factory():
    """Factory building a daily series from a list of values."""
    return make_series


@pytest.fixture
def noisy_series():
    """Sixty daily revenue points with a few planted outliers."""
    rng = random.Random(7)
    values = [100_000 * rng.uniform(0.95, 1.05) for _ in range(60)]
    values[10] = 160_000
    values[30] = 55_000
    values[45] = 130_000
    return make_series(values)


# Simulator fixtures
@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def revenue_bounds():
    """Revenue bounds from the live dashboard scenario."""
    return MetricBounds(min_value=100_000, max_value=200_000, max_step_fraction=0.01)


@pytest.fixture
def simulator_config():
    """In-memory, seeded configuration for fast tests."""
    return SimulatorConfig(tick_interval_seconds=0.01, retention_points=100, seed=1234)


# Analytics fixtures
@pytest.fixture
def analytics_config():
    return AnalyticsConfig()
