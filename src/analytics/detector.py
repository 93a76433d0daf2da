"""
Z-score anomaly detection over a trailing window.

Workflow:
1. Take the last `window_size` points of the series
2. Compute the population mean and standard deviation of the window
3. Flag points strictly outside mean +/- (base_threshold * sensitivity) * stddev
4. Bucket each flagged point by how many standard deviations it sits from the mean

Detection is a pure function of its inputs: no randomness, no mutation of
the series, identical output for identical input.
"""

import structlog

from src.timeseries.models import Observation
from src.timeseries.series import TimeSeries
from src.timeseries.stats import mean, stddev

from .config import AnalyticsConfig
from .models import AnomalyKind, AnomalyRecord, DetectionBands, SensitivityLevel, Severity

logger = structlog.get_logger(__name__)


class AnomalyDetector:
    """Flags spikes and drops in a metric's recent window"""

    def __init__(
        self,
        base_threshold: float = 2.0,
        medium_severity_sigma: float = 2.5,
        high_severity_sigma: float = 3.0,
    ):
        self.base_threshold = base_threshold
        self.medium_severity_sigma = medium_severity_sigma
        self.high_severity_sigma = high_severity_sigma

    @classmethod
    def from_config(cls, config: AnalyticsConfig) -> "AnomalyDetector":
        return cls(
            base_threshold=config.base_threshold,
            medium_severity_sigma=config.medium_severity_sigma,
            high_severity_sigma=config.high_severity_sigma,
        )

    def bands(
        self, series: TimeSeries, window_size: int, sensitivity: SensitivityLevel | str
    ) -> DetectionBands | None:
        """Thresholds for the current window, None when there are fewer than 2 points"""
        return self._bands_for(series.window(window_size), sensitivity)

    def _bands_for(
        self, window: tuple[Observation, ...], sensitivity: SensitivityLevel | str
    ) -> DetectionBands | None:
        if len(window) < 2:
            return None

        values = [p.value for p in window]
        mu = mean(values)
        sigma = stddev(values)
        threshold = self.base_threshold * SensitivityLevel(sensitivity).multiplier

        return DetectionBands(
            mean=mu,
            stddev=sigma,
            threshold=threshold,
            lower_bound=mu - threshold * sigma,
            upper_bound=mu + threshold * sigma,
            window_length=len(window),
        )

    def detect(
        self, series: TimeSeries, window_size: int, sensitivity: SensitivityLevel | str
    ) -> list[AnomalyRecord]:
        """Detect anomalies in the trailing window of a series

        Args:
            series: Series to analyse (read only)
            window_size: Number of trailing points to consider
            sensitivity: low, medium or high

        Returns:
            Flagged points in chronological order; empty for empty series,
            window_size <= 0, single-point windows and constant windows
        """
        # One read: bounds and flagged points come from the same window
        window = series.window(window_size)
        bands = self._bands_for(window, sensitivity)
        if bands is None or bands.stddev == 0:
            return []

        anomalies = []
        for index, point in enumerate(window):
            if point.value > bands.upper_bound:
                kind = AnomalyKind.SPIKE
            elif point.value < bands.lower_bound:
                kind = AnomalyKind.DROP
            else:
                continue

            deviation = abs(point.value - bands.mean)
            anomalies.append(
                AnomalyRecord(
                    index=index,
                    timestamp=point.timestamp,
                    value=point.value,
                    kind=kind,
                    severity=self.classify_severity(deviation, bands.stddev),
                    percent_change=self._percent_change(point.value, bands.mean),
                    z_score=deviation / bands.stddev,
                    metric=series.metric,
                )
            )

        logger.debug(
            "Anomaly detection completed",
            metric=series.name,
            window=bands.window_length,
            mean=round(bands.mean, 4),
            stddev=round(bands.stddev, 4),
            threshold=bands.threshold,
            anomalies=len(anomalies),
        )
        return anomalies

    def classify_severity(self, deviation: float, sigma: float) -> Severity:
        """Display bucket from the absolute deviation in multiples of sigma"""
        if sigma == 0:
            return Severity.LOW
        if deviation > self.high_severity_sigma * sigma:
            return Severity.HIGH
        if deviation > self.medium_severity_sigma * sigma:
            return Severity.MEDIUM
        return Severity.LOW

    @staticmethod
    def _percent_change(value: float, mu: float) -> float:
        # Undefined against a zero mean; reported as no change
        if mu == 0:
            return 0.0
        return round((value - mu) / mu * 100, 1)


def detect(
    series: TimeSeries, window_size: int, sensitivity: SensitivityLevel | str
) -> list[AnomalyRecord]:
    """Detect anomalies with the default thresholds"""
    return AnomalyDetector().detect(series, window_size, sensitivity)
