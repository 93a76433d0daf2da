"""
Append-only time series for a single metric.
"""

import threading
from collections.abc import Iterable, Iterator
from datetime import datetime

import pandas as pd
import structlog

from src.core.errors import InvalidConfigurationError, OutOfOrderError

from .models import MetricId, Observation, metric_key
from .stats import mean, stddev

logger = structlog.get_logger(__name__)


class TimeSeries:
    """Chronologically ordered observations of one metric

    Writers go through append() and truncate(); readers get tuple copies from
    window() and snapshot(), so analytics never see a series change under them.
    """

    mean = staticmethod(mean)
    stddev = staticmethod(stddev)

    def __init__(self, metric: MetricId | str, points: Iterable[Observation] | None = None):
        self.metric = metric
        self._points: list[Observation] = []
        self._lock = threading.Lock()
        for obs in points or ():
            self.append(obs)

    @classmethod
    def seeded(cls, metric: MetricId | str, baseline: float, timestamp: datetime) -> "TimeSeries":
        """Create a series holding a single baseline observation"""
        return cls(metric, [Observation(timestamp=timestamp, value=float(baseline))])

    @property
    def name(self) -> str:
        return metric_key(self.metric)

    def append(self, obs: Observation) -> None:
        """Append an observation

        Raises:
            OutOfOrderError: If obs.timestamp is not strictly after the last point
        """
        with self._lock:
            if self._points and obs.timestamp <= self._points[-1].timestamp:
                raise OutOfOrderError(self.name, obs.timestamp, self._points[-1].timestamp)
            self._points.append(obs)

    def window(self, n: int) -> tuple[Observation, ...]:
        """Last n observations (fewer if the series is shorter, empty for n <= 0)"""
        if n <= 0:
            return ()
        with self._lock:
            return tuple(self._points[-n:])

    def values(self, n: int | None = None) -> list[float]:
        points = self.snapshot() if n is None else self.window(n)
        return [p.value for p in points]

    def snapshot(self) -> tuple[Observation, ...]:
        with self._lock:
            return tuple(self._points)

    def truncate(self, max_length: int) -> int:
        """Keep only the most recent max_length points

        Returns:
            Number of points dropped
        """
        if max_length < 0:
            raise InvalidConfigurationError(f"max_length must be >= 0, got {max_length}")
        with self._lock:
            dropped = max(0, len(self._points) - max_length)
            if dropped:
                del self._points[:dropped]
        if dropped:
            logger.debug("Series truncated", metric=self.name, dropped=dropped, kept=max_length)
        return dropped

    @property
    def last(self) -> Observation | None:
        with self._lock:
            return self._points[-1] if self._points else None

    def to_frame(self) -> pd.DataFrame:
        """DataFrame with columns ['timestamp', 'value'] sorted by timestamp"""
        points = self.snapshot()
        return pd.DataFrame(
            {
                "timestamp": [p.timestamp for p in points],
                "value": [p.value for p in points],
            },
            columns=["timestamp", "value"],
        )

    @classmethod
    def from_frame(cls, metric: MetricId | str, frame: pd.DataFrame) -> "TimeSeries":
        """Build a series from a ['timestamp', 'value'] DataFrame

        Rows are sorted by timestamp and rows without a value are skipped.
        """
        missing = {"timestamp", "value"} - set(frame.columns)
        if missing:
            raise ValueError(f"Frame missing required columns: {missing}")

        frame = frame.dropna(subset=["value"]).sort_values("timestamp")
        points = [
            Observation(timestamp=pd.Timestamp(ts).to_pydatetime(), value=float(value))
            for ts, value in zip(frame["timestamp"], frame["value"])
        ]
        return cls(metric, points)

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)

    def __iter__(self) -> Iterator[Observation]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"TimeSeries(metric={self.name!r}, points={len(self)})"
