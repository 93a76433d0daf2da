"""
Data models for anomaly detection and forecasting results.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from src.timeseries.models import MetricId, metric_key


class SensitivityLevel(str, Enum):
    """How eagerly the detector flags points; higher means a narrower band"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def multiplier(self) -> float:
        return SENSITIVITY_MULTIPLIERS[self]


SENSITIVITY_MULTIPLIERS = {
    SensitivityLevel.LOW: 1.5,
    SensitivityLevel.MEDIUM: 1.0,
    SensitivityLevel.HIGH: 0.7,
}


class AnomalyKind(str, Enum):
    SPIKE = "spike"
    DROP = "drop"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Trailing window lengths (daily points) of the dashboard timeframes
TIMEFRAMES = {"7d": 7, "30d": 30, "90d": 90}


def window_for_timeframe(timeframe: str) -> int:
    if timeframe not in TIMEFRAMES:
        available = ", ".join(TIMEFRAMES.keys())
        raise ValueError(f"Unknown timeframe '{timeframe}'. Available: {available}")
    return TIMEFRAMES[timeframe]


@dataclass(frozen=True)
class AnomalyRecord:
    """A point flagged by the detector, index relative to the analysed window"""

    index: int
    timestamp: datetime
    value: float
    kind: AnomalyKind
    severity: Severity
    percent_change: float
    z_score: float
    metric: MetricId | str

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "timestamp": self.timestamp.isoformat(),
            "value": self.value,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "percent_change": self.percent_change,
            "z_score": self.z_score,
            "metric": metric_key(self.metric),
        }


@dataclass(frozen=True)
class DetectionBands:
    """Statistics and thresholds the detector applied to a window"""

    mean: float
    stddev: float
    threshold: float
    lower_bound: float
    upper_bound: float
    window_length: int


@dataclass(frozen=True)
class ForecastPoint:
    """A historical, current or forecast value with its confidence band

    Historical and current points carry no uncertainty: both bounds equal the
    point estimate.
    """

    timestamp: datetime
    point_estimate: float
    lower_bound: float
    upper_bound: float
    is_historical: bool
    is_current: bool = False

    @property
    def is_forecast(self) -> bool:
        return not (self.is_historical or self.is_current)

    @property
    def band_width(self) -> float:
        return self.upper_bound - self.lower_bound

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "point_estimate": self.point_estimate,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "is_historical": self.is_historical,
            "is_current": self.is_current,
        }


@dataclass(frozen=True)
class ForecastSummary:
    """Headline numbers of a forecast for display"""

    horizon_months: int
    next_period: Optional[float]
    total_growth_percent: float
    confidence: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "horizon_months": self.horizon_months,
            "next_period": self.next_period,
            "total_growth_percent": self.total_growth_percent,
            "confidence": self.confidence,
        }
