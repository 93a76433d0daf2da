"""
Data models for the metric simulator.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.core.errors import InvalidConfigurationError
from src.timeseries.models import MetricId, metric_key


@dataclass(frozen=True)
class MetricBounds:
    """Realistic range and per-tick step limit of a simulated metric"""

    min_value: float
    max_value: float
    max_step_fraction: float  # e.g. 0.01 = at most 1% of the current value per tick

    def __post_init__(self):
        if any(math.isnan(v) for v in (self.min_value, self.max_value, self.max_step_fraction)):
            raise InvalidConfigurationError("MetricBounds values must not be NaN")
        if self.min_value > self.max_value:
            raise InvalidConfigurationError(
                f"min_value ({self.min_value}) must not exceed max_value ({self.max_value})"
            )
        if self.max_step_fraction <= 0:
            raise InvalidConfigurationError(
                f"max_step_fraction must be > 0, got {self.max_step_fraction}"
            )

    def clamp(self, value: float) -> float:
        return min(self.max_value, max(self.min_value, value))


@dataclass(frozen=True)
class SimulatorState:
    """Last simulated value of one metric"""

    metric: MetricId | str
    current_value: float
    last_updated: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "metric": metric_key(self.metric),
            "current_value": self.current_value,
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SimulatorState":
        """Create from dictionary"""
        name = data["metric"]
        try:
            metric: MetricId | str = MetricId(name)
        except ValueError:
            metric = name
        return cls(
            metric=metric,
            current_value=float(data["current_value"]),
            last_updated=datetime.fromisoformat(data["last_updated"]),
        )
