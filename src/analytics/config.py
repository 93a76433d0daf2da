"""
Configuration for the analytics layer.
"""

from dataclasses import dataclass, field

from src.core.errors import InvalidConfigurationError
from src.timeseries.models import MetricId

from .models import SensitivityLevel

# Annual growth in percent shown on the forecasting dashboard
DEFAULT_ANNUAL_GROWTH: dict[MetricId, float] = {
    MetricId.REVENUE: 14.8,
    MetricId.CUSTOMERS: 8.7,
    MetricId.CONVERSION_RATE: 1.4,
    MetricId.ORDERS: 11.2,
}


def monthly_rate_from_annual(annual_percent: float) -> float:
    """Spread an annual growth percentage evenly over twelve months"""
    return annual_percent / 100 / 12


@dataclass
class AnalyticsConfig:
    """Detection and forecasting parameters"""

    # Anomaly detection
    window_size: int = 30
    sensitivity: SensitivityLevel = SensitivityLevel.MEDIUM
    base_threshold: float = 2.0  # z-score before the sensitivity multiplier
    medium_severity_sigma: float = 2.5
    high_severity_sigma: float = 3.0

    # Forecasting
    history_months: int = 6
    horizon_months: int = 3
    uncertainty_step: float = 0.05  # band widens by 5% of the estimate per month
    growth_rates: dict[MetricId, float] = field(
        default_factory=lambda: {
            metric: monthly_rate_from_annual(annual)
            for metric, annual in DEFAULT_ANNUAL_GROWTH.items()
        }
    )

    def __post_init__(self):
        try:
            self.sensitivity = SensitivityLevel(self.sensitivity)
        except ValueError as e:
            raise InvalidConfigurationError(f"Unknown sensitivity '{self.sensitivity}'") from e

        if self.window_size < 0:
            raise InvalidConfigurationError(f"window_size must be >= 0, got {self.window_size}")
        if self.history_months < 0 or self.horizon_months < 0:
            raise InvalidConfigurationError("history_months and horizon_months must be >= 0")
        if self.base_threshold <= 0:
            raise InvalidConfigurationError(
                f"base_threshold must be > 0, got {self.base_threshold}"
            )
        if not 0 < self.medium_severity_sigma <= self.high_severity_sigma:
            raise InvalidConfigurationError(
                "Severity thresholds must satisfy 0 < medium_severity_sigma <= high_severity_sigma"
            )
        if self.uncertainty_step < 0:
            raise InvalidConfigurationError(
                f"uncertainty_step must be >= 0, got {self.uncertainty_step}"
            )

    def growth_rate_for(self, metric: MetricId) -> float:
        """Monthly growth rate of a metric, 0.0 if none is configured"""
        return self.growth_rates.get(metric, 0.0)
