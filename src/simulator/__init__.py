"""
Business KPI simulator.
Advances each metric with a clamped random walk and persists its last state.
"""

from .config import (
    ANALYTICS_REFRESH_CONFIG,
    DEFAULT_BASELINES,
    DEFAULT_BOUNDS,
    DEV_CONFIG,
    LIVE_CONFIG,
    SimulatorConfig,
)
from .derived import DerivedMetrics, avg_order_value, compute_derived, customer_lifetime_value
from .models import MetricBounds, SimulatorState
from .simulator import MetricSimulator
from .store import InMemoryStateStore, JsonFileStateStore, StateStore

__all__ = [
    "ANALYTICS_REFRESH_CONFIG",
    "DEFAULT_BASELINES",
    "DEFAULT_BOUNDS",
    "DEV_CONFIG",
    "DerivedMetrics",
    "InMemoryStateStore",
    "JsonFileStateStore",
    "LIVE_CONFIG",
    "MetricBounds",
    "MetricSimulator",
    "SimulatorConfig",
    "SimulatorState",
    "StateStore",
    "avg_order_value",
    "compute_derived",
    "customer_lifetime_value",
]
