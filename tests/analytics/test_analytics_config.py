"""
Tests for AnalyticsConfig and analytics models.
"""

import pytest

from src.analytics.config import AnalyticsConfig, monthly_rate_from_annual
from src.analytics.detector import AnomalyDetector
from src.analytics.forecaster import Forecaster
from src.analytics.models import SensitivityLevel, window_for_timeframe
from src.core.errors import InvalidConfigurationError
from src.timeseries.models import MetricId


class TestAnalyticsConfig:
    def test_defaults(self, analytics_config):
        assert analytics_config.window_size == 30
        assert analytics_config.sensitivity is SensitivityLevel.MEDIUM
        assert analytics_config.history_months == 6
        assert analytics_config.horizon_months == 3

    def test_growth_rates_are_monthly(self, analytics_config):
        assert analytics_config.growth_rate_for(MetricId.REVENUE) == pytest.approx(0.148 / 12)
        assert analytics_config.growth_rate_for(MetricId.CHURN_RATE) == 0.0

    def test_sensitivity_from_string(self):
        assert AnalyticsConfig(sensitivity="high").sensitivity is SensitivityLevel.HIGH

    def test_unknown_sensitivity(self):
        with pytest.raises(InvalidConfigurationError, match="sensitivity"):
            AnalyticsConfig(sensitivity="extreme")

    def test_negative_window(self):
        with pytest.raises(InvalidConfigurationError, match="window_size"):
            AnalyticsConfig(window_size=-1)

    def test_negative_horizon(self):
        with pytest.raises(InvalidConfigurationError):
            AnalyticsConfig(horizon_months=-3)

    def test_severity_order(self):
        with pytest.raises(InvalidConfigurationError, match="Severity thresholds"):
            AnalyticsConfig(medium_severity_sigma=3.5, high_severity_sigma=3.0)

    def test_components_from_config(self):
        config = AnalyticsConfig(base_threshold=2.5, uncertainty_step=0.1)

        assert AnomalyDetector.from_config(config).base_threshold == 2.5
        assert Forecaster.from_config(config).uncertainty_step == 0.1


class TestModels:
    def test_monthly_rate_from_annual(self):
        assert monthly_rate_from_annual(12.0) == pytest.approx(0.01)

    def test_sensitivity_multipliers(self):
        assert SensitivityLevel.LOW.multiplier == 1.5
        assert SensitivityLevel.MEDIUM.multiplier == 1.0
        assert SensitivityLevel.HIGH.multiplier == 0.7

    def test_timeframes(self):
        assert window_for_timeframe("7d") == 7
        assert window_for_timeframe("90d") == 90

        with pytest.raises(ValueError, match="Unknown timeframe"):
            window_for_timeframe("1y")
