"""
KPI analytics: anomaly detection and forecasting.

Both components are pure, read-only views over a TimeSeries snapshot and may
be called concurrently against the same series.

Usage:
    # Detect and forecast over generated demo data
    python -m src.analytics.analyze --metric revenue --timeframe 30d
"""

from .config import AnalyticsConfig, monthly_rate_from_annual
from .detector import AnomalyDetector, detect
from .forecaster import Forecaster, confidence_for_horizon, forecast
from .models import (
    AnomalyKind,
    AnomalyRecord,
    DetectionBands,
    ForecastPoint,
    ForecastSummary,
    SensitivityLevel,
    Severity,
    window_for_timeframe,
)

__all__ = [
    "AnalyticsConfig",
    "AnomalyDetector",
    "AnomalyKind",
    "AnomalyRecord",
    "DetectionBands",
    "ForecastPoint",
    "ForecastSummary",
    "Forecaster",
    "SensitivityLevel",
    "Severity",
    "confidence_for_horizon",
    "detect",
    "forecast",
    "monthly_rate_from_annual",
    "window_for_timeframe",
]
