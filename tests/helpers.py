"""
Builders shared by test modules.
"""

from datetime import UTC, datetime, timedelta

from src.timeseries.models import MetricId, Observation
from src.timeseries.series import TimeSeries

START = datetime(2025, 1, 1, tzinfo=UTC)


def make_series(values, metric=MetricId.REVENUE, start=START, step=timedelta(days=1)):
    """Series with one observation per step starting at `start`."""
    return TimeSeries(
        metric,
        [Observation(timestamp=start + i * step, value=float(v)) for i, v in enumerate(values)],
    )


class FixedClock:
    """Clock returning a controllable instant."""

    def __init__(self, now=START):
        self.now = now

    def advance(self, seconds=60):
        self.now += timedelta(seconds=seconds)
        return self.now

    def __call__(self):
        return self.now
