"""
Compounding-growth forecasts with widening confidence bands.

From the most recent observation V0, month i of the horizon is estimated as
V0 * (1 + g)^i with a band of +/- (uncertainty_step * i) around the estimate.
"""

import math

import pandas as pd
import structlog

from src.timeseries.series import TimeSeries

from .config import AnalyticsConfig
from .models import ForecastPoint, ForecastSummary

logger = structlog.get_logger(__name__)

# Display confidence of a forecast, lowered for longer horizons
BASE_CONFIDENCE = 85
HORIZON_PENALTIES = ((12, 15), (6, 10), (3, 5))


def confidence_for_horizon(horizon_months: int) -> int:
    for min_months, penalty in HORIZON_PENALTIES:
        if horizon_months >= min_months:
            return BASE_CONFIDENCE - penalty
    return BASE_CONFIDENCE


class Forecaster:
    """Extrapolates a monthly series forward at a fixed growth rate"""

    def __init__(self, uncertainty_step: float = 0.05):
        self.uncertainty_step = uncertainty_step

    @classmethod
    def from_config(cls, config: AnalyticsConfig) -> "Forecaster":
        return cls(uncertainty_step=config.uncertainty_step)

    def forecast(
        self,
        series: TimeSeries,
        monthly_growth_rate: float,
        history_months: int,
        horizon_months: int,
    ) -> list[ForecastPoint]:
        """Historical, current and forecast points for a monthly series

        The last observation is the current point and the anchor V0. Up to
        history_months observations before it form the historical segment.

        Args:
            series: Monthly-granularity series (read only)
            monthly_growth_rate: Growth per month, negative for contraction
            history_months: Historical points to include before the anchor
            horizon_months: Months to forecast after the anchor

        Returns:
            Points in chronological order; empty for an empty series. The
            forecast stops early at the first month whose estimate, band or
            date cannot be represented, so it can hold fewer than
            horizon_months points.
        """
        points = series.snapshot()
        if not points:
            return []

        anchor = points[-1]
        history = points[:-1][-history_months:] if history_months > 0 else ()

        result = [
            ForecastPoint(
                timestamp=p.timestamp,
                point_estimate=p.value,
                lower_bound=p.value,
                upper_bound=p.value,
                is_historical=True,
            )
            for p in history
        ]
        result.append(
            ForecastPoint(
                timestamp=anchor.timestamp,
                point_estimate=anchor.value,
                lower_bound=anchor.value,
                upper_bound=anchor.value,
                is_historical=False,
                is_current=True,
            )
        )

        v0 = anchor.value
        previous_width = 0.0
        for i in range(1, max(0, horizon_months) + 1):
            try:
                estimate = v0 * (1 + monthly_growth_rate) ** i
                timestamp = self._month_offset(anchor.timestamp, i)
            except (OverflowError, ValueError):
                estimate = math.inf

            uncertainty = self.uncertainty_step * i
            lower, upper = sorted((estimate * (1 - uncertainty), estimate * (1 + uncertainty)))
            if not all(math.isfinite(v) for v in (estimate, lower, upper)):
                logger.warning(
                    "Forecast truncated at representable range",
                    metric=series.name,
                    growth_rate=monthly_growth_rate,
                    months_forecast=i - 1,
                    horizon=horizon_months,
                )
                break

            # A contracting estimate can shrink the band; hold the previous width
            if upper - lower < previous_width:
                lower = estimate - previous_width / 2
                upper = estimate + previous_width / 2
            previous_width = upper - lower

            result.append(
                ForecastPoint(
                    timestamp=timestamp,
                    point_estimate=estimate,
                    lower_bound=lower,
                    upper_bound=upper,
                    is_historical=False,
                )
            )

        logger.debug(
            "Forecast computed",
            metric=series.name,
            anchor=v0,
            growth_rate=monthly_growth_rate,
            history=len(history),
            horizon=max(0, horizon_months),
        )
        return result

    def summarize(self, points: list[ForecastPoint]) -> ForecastSummary:
        """Next-period estimate, total growth and display confidence"""
        forecast = [p for p in points if p.is_forecast]
        current = next((p for p in points if p.is_current), None)

        next_period = forecast[0].point_estimate if forecast else None
        total_growth = 0.0
        if forecast and current is not None and current.point_estimate != 0:
            total_growth = (forecast[-1].point_estimate / current.point_estimate - 1) * 100

        return ForecastSummary(
            horizon_months=len(forecast),
            next_period=next_period,
            total_growth_percent=round(total_growth, 2),
            confidence=confidence_for_horizon(len(forecast)),
        )

    @staticmethod
    def _month_offset(timestamp, months: int):
        return (pd.Timestamp(timestamp) + pd.DateOffset(months=months)).to_pydatetime()


def forecast(
    series: TimeSeries, monthly_growth_rate: float, history_months: int, horizon_months: int
) -> list[ForecastPoint]:
    """Forecast with the default 5% per month uncertainty growth"""
    return Forecaster().forecast(series, monthly_growth_rate, history_months, horizon_months)
