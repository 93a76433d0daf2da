"""
Exception taxonomy for the KPI engine.
"""

from datetime import datetime


class KpiEngineError(Exception):
    """Base class for all engine errors"""


class OutOfOrderError(KpiEngineError):
    """An observation did not strictly follow the latest point of its series"""

    def __init__(self, metric: str, timestamp: datetime, last_timestamp: datetime):
        self.metric = metric
        self.timestamp = timestamp
        self.last_timestamp = last_timestamp
        super().__init__(
            f"Observation for '{metric}' at {timestamp.isoformat()} "
            f"does not follow last point at {last_timestamp.isoformat()}"
        )


class InvalidConfigurationError(KpiEngineError, ValueError):
    """Configuration values are inconsistent or out of range"""
