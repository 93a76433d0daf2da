"""
Data models for metric observations.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class MetricId(str, Enum):
    """Tracked business metrics"""

    REVENUE = "revenue"
    CUSTOMERS = "customers"
    CONVERSION_RATE = "conversion_rate"
    CHURN_RATE = "churn_rate"
    ORDERS = "orders"
    ACTIVE_USERS = "active_users"


@dataclass(frozen=True)
class Observation:
    """A single timestamped value of one metric"""

    timestamp: datetime
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp.isoformat(), "value": self.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Observation":
        return cls(timestamp=datetime.fromisoformat(data["timestamp"]), value=float(data["value"]))


def metric_key(metric: MetricId | str) -> str:
    """Plain string name of a metric, used for store keys and log fields"""
    return metric.value if isinstance(metric, MetricId) else str(metric)
