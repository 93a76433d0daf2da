"""
Derived business metrics.

These are never simulated on their own: they are recomputed from the
primitive metrics on every read so they cannot drift away from their inputs.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Optional

from src.timeseries.models import MetricId


def avg_order_value(revenue: float, orders: float) -> float:
    """Revenue per order, 0.0 when there are no orders"""
    if orders == 0:
        return 0.0
    return revenue / orders


def customer_lifetime_value(revenue: float, customers: float, churn_rate: float) -> float:
    """Revenue per customer over the expected customer lifetime

    The expected lifetime in periods is 1 / churn, with churn_rate given in
    percent per period.
    """
    if customers == 0 or churn_rate == 0:
        return 0.0
    return (revenue / customers) * (1 / (churn_rate / 100))


@dataclass(frozen=True)
class DerivedMetrics:
    avg_order_value: Optional[float]
    customer_lifetime_value: Optional[float]

    def to_dict(self) -> dict:
        return asdict(self)


def compute_derived(values: Mapping[MetricId, float]) -> DerivedMetrics:
    """Recompute every derived metric whose inputs are present in values"""
    aov = None
    if MetricId.REVENUE in values and MetricId.ORDERS in values:
        aov = avg_order_value(values[MetricId.REVENUE], values[MetricId.ORDERS])

    clv = None
    if all(m in values for m in (MetricId.REVENUE, MetricId.CUSTOMERS, MetricId.CHURN_RATE)):
        clv = customer_lifetime_value(
            values[MetricId.REVENUE], values[MetricId.CUSTOMERS], values[MetricId.CHURN_RATE]
        )

    return DerivedMetrics(avg_order_value=aov, customer_lifetime_value=clv)
