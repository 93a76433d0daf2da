"""
Time series model for business KPIs.

An append-only, chronologically ordered sequence of observations per metric,
with windowing and population statistics used by the analytics layer.
"""

from .aggregation import aggregate_monthly
from .models import MetricId, Observation
from .series import TimeSeries
from .stats import mean, stddev

__all__ = [
    "MetricId",
    "Observation",
    "TimeSeries",
    "aggregate_monthly",
    "mean",
    "stddev",
]
