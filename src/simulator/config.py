"""
Simulator configuration and predefined operating presets.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

from src.core.errors import InvalidConfigurationError
from src.timeseries.models import MetricId, metric_key

from .models import MetricBounds

# Floors and ceilings of the live dashboard; ceilings only keep walks finite
DEFAULT_BOUNDS: dict[MetricId, MetricBounds] = {
    MetricId.REVENUE: MetricBounds(100_000, 10_000_000, 0.01),
    MetricId.CUSTOMERS: MetricBounds(2_000, 1_000_000, 0.003),
    MetricId.CONVERSION_RATE: MetricBounds(0.5, 8.0, 0.02),
    MetricId.CHURN_RATE: MetricBounds(0.1, 15.0, 0.02),
    MetricId.ORDERS: MetricBounds(1_000, 1_000_000, 0.004),
    MetricId.ACTIVE_USERS: MetricBounds(300, 100_000, 0.03),
}

DEFAULT_BASELINES: dict[MetricId, float] = {
    MetricId.REVENUE: 125_000.0,
    MetricId.CUSTOMERS: 2_847.0,
    MetricId.CONVERSION_RATE: 3.2,
    MetricId.CHURN_RATE: 5.8,
    MetricId.ORDERS: 1_234.0,
    MetricId.ACTIVE_USERS: 456.0,
}

STORE_BACKENDS = ("memory", "file", "redis", "postgres")


@dataclass
class SimulatorConfig:
    """Configuration for the simulator and its tick scheduler"""

    # Scheduling
    tick_interval_seconds: float = 60.0
    retention_points: int = 1440  # one day of 60s ticks

    # Metrics
    metrics: list[MetricId] = field(default_factory=lambda: list(DEFAULT_BOUNDS))
    bounds: dict[MetricId, MetricBounds] = field(default_factory=lambda: dict(DEFAULT_BOUNDS))
    baselines: dict[MetricId, float] = field(default_factory=lambda: dict(DEFAULT_BASELINES))
    seed: Optional[int] = None

    # State persistence
    store_backend: str = "memory"
    state_file: str = "simulator_state.json"

    # Redis settings
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None
    redis_key_prefix: str = "kpi:state"

    # PostgreSQL settings
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_database: str = "kpi_db"
    postgres_user: str = "kpi"
    postgres_password: str = "kpi_password"

    # Kafka settings (optional observation publishing)
    kafka_enabled: bool = False
    kafka_bootstrap_servers: str = "localhost:9092"
    kafka_topic: str = "kpi-observations"

    def __post_init__(self):
        if self.tick_interval_seconds <= 0:
            raise InvalidConfigurationError(
                f"tick_interval_seconds must be > 0, got {self.tick_interval_seconds}"
            )
        if self.retention_points < 0:
            raise InvalidConfigurationError(
                f"retention_points must be >= 0, got {self.retention_points}"
            )
        if self.store_backend not in STORE_BACKENDS:
            raise InvalidConfigurationError(
                f"Unknown store backend '{self.store_backend}'. "
                f"Available: {', '.join(STORE_BACKENDS)}"
            )
        missing = [m for m in self.metrics if m not in self.bounds or m not in self.baselines]
        if missing:
            raise InvalidConfigurationError(
                f"Metrics without bounds or baseline: {', '.join(metric_key(m) for m in missing)}"
            )


# Live dashboard ticks
LIVE_CONFIG = SimulatorConfig(tick_interval_seconds=60.0, store_backend="file")

# Analytics auto-refresh
ANALYTICS_REFRESH_CONFIG = SimulatorConfig(tick_interval_seconds=300.0, retention_points=2016)

# Development/Testing (fast, in-memory, reproducible)
DEV_CONFIG = SimulatorConfig(tick_interval_seconds=1.0, retention_points=500, seed=42)


def preset(name: str) -> SimulatorConfig:
    """Fresh copy of a named preset, safe to mutate"""
    presets = {"live": LIVE_CONFIG, "refresh": ANALYTICS_REFRESH_CONFIG, "dev": DEV_CONFIG}
    if name not in presets:
        raise InvalidConfigurationError(
            f"Unknown preset '{name}'. Available: {', '.join(presets)}"
        )
    base = presets[name]
    return replace(
        base, metrics=list(base.metrics), bounds=dict(base.bounds), baselines=dict(base.baselines)
    )
