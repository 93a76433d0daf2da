"""
Calendar aggregation of a series into monthly buckets.

The forecaster works on monthly values; callers holding daily or per-tick
observations use aggregate_monthly() to prepare its input.
"""

import pandas as pd

from .series import TimeSeries

AGGREGATIONS = ("mean", "last", "sum")


def aggregate_monthly(series: TimeSeries, how: str = "mean") -> TimeSeries:
    """Resample a series to one observation per calendar month

    Each bucket is stamped with the first instant of its month. Months with no
    observations are omitted.

    Args:
        series: Source series, any granularity
        how: One of 'mean', 'last' or 'sum'

    Returns:
        A new TimeSeries for the same metric
    """
    if how not in AGGREGATIONS:
        raise ValueError(f"Unknown aggregation '{how}'. Available: {', '.join(AGGREGATIONS)}")

    frame = series.to_frame()
    if frame.empty:
        return TimeSeries(series.metric)

    frame["timestamp"] = pd.to_datetime(frame["timestamp"])
    monthly = getattr(frame.set_index("timestamp")["value"].resample("MS"), how)()
    if how == "sum":
        counts = frame.set_index("timestamp")["value"].resample("MS").count()
        monthly = monthly[counts > 0]
    monthly = monthly.dropna()

    return TimeSeries.from_frame(
        series.metric, monthly.rename("value").rename_axis("timestamp").reset_index()
    )
