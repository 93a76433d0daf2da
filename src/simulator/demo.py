"""
Demo and test data generation.

These generators fabricate history for demos and tests, including labelled
anomaly injection. They are not part of detection: the detector only ever
sees the resulting series, and the injected labels are returned separately
so tests can compare what was planted against what was found.
"""

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pandas as pd
import structlog

from src.analytics.models import AnomalyKind
from src.timeseries.models import MetricId, Observation, metric_key
from src.timeseries.series import TimeSeries

logger = structlog.get_logger(__name__)

SPIKE_FACTOR = 1.5
DROP_FACTOR = 0.6


@dataclass(frozen=True)
class InjectedAnomaly:
    """An anomaly deliberately planted into demo data"""

    index: int
    timestamp: datetime
    kind: AnomalyKind
    factor: float


@dataclass
class DemoSeries:
    series: TimeSeries
    injected: list[InjectedAnomaly] = field(default_factory=list)


def generate_daily_history(
    metric: MetricId | str,
    days: int,
    baseline: float,
    end: datetime | None = None,
    anomaly_probability: float = 0.05,
    trend: float = 0.2,
    noise: float = 0.1,
    rng: random.Random | None = None,
) -> DemoSeries:
    """Daily history with a gradual trend, noise and injected anomalies

    Args:
        metric: Metric the series belongs to
        days: Number of daily points, ending at `end`
        baseline: Value at the start of the period before trend and noise
        end: Last day (defaults to today, UTC midnight)
        anomaly_probability: Chance that a day gets a spike or a drop
        trend: Total relative growth across the period (0.2 = +20%)
        noise: Half-width of the uniform relative noise (0.1 = +/-10%)
        rng: Random source, for reproducible data
    """
    rng = rng or random.Random()
    end = end or datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    if days <= 0:
        return DemoSeries(series=TimeSeries(metric))

    timestamps = pd.date_range(end=end, periods=days, freq="D").to_pydatetime()

    points: list[Observation] = []
    injected: list[InjectedAnomaly] = []
    for i, ts in enumerate(timestamps):
        day_factor = 1 + (i + 1) / days * trend
        random_factor = rng.uniform(1 - noise, 1 + noise)
        value = baseline * day_factor * random_factor

        if rng.random() < anomaly_probability:
            kind = AnomalyKind.SPIKE if rng.random() > 0.5 else AnomalyKind.DROP
            factor = SPIKE_FACTOR if kind is AnomalyKind.SPIKE else DROP_FACTOR
            value *= factor
            injected.append(InjectedAnomaly(index=i, timestamp=ts, kind=kind, factor=factor))

        points.append(Observation(timestamp=ts, value=value))

    logger.debug(
        "Generated daily demo history",
        metric=metric_key(metric),
        days=days,
        injected=len(injected),
    )
    return DemoSeries(series=TimeSeries(metric, points), injected=injected)


def generate_monthly_history(
    metric: MetricId | str,
    months: int,
    current_value: float,
    monthly_growth_rate: float,
    end: datetime | None = None,
    variation: float = 0.05,
    rng: random.Random | None = None,
) -> TimeSeries:
    """Monthly history that grew into current_value

    Produces `months` historical points followed by the current month, whose
    value is exactly current_value. Earlier months are back-projected with
    the growth rate and perturbed by up to +/-variation.
    """
    rng = rng or random.Random()
    end = end or datetime.now(UTC)
    end = end.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    timestamps = pd.date_range(end=end, periods=months + 1, freq="MS").to_pydatetime()

    points = []
    for offset, ts in zip(range(-months, 1), timestamps):
        if offset == 0:
            value = current_value
        else:
            value = current_value * (1 + monthly_growth_rate) ** offset
            value *= 1 + rng.uniform(-variation, variation)
        points.append(Observation(timestamp=ts, value=value))

    return TimeSeries(metric, points)
