"""
Tests for derived business metrics.
"""

import pytest

from src.simulator.derived import (
    DerivedMetrics,
    avg_order_value,
    compute_derived,
    customer_lifetime_value,
)
from src.timeseries.models import MetricId


class TestAvgOrderValue:
    def test_value(self):
        assert avg_order_value(125_000, 1_250) == 100.0

    def test_no_orders(self):
        assert avg_order_value(125_000, 0) == 0.0


class TestCustomerLifetimeValue:
    def test_value(self):
        """Revenue per customer times expected lifetime 1 / churn."""
        assert customer_lifetime_value(100_000, 1_000, 5.0) == pytest.approx(2_000.0)

    @pytest.mark.parametrize("customers,churn", [(0, 5.0), (1_000, 0)])
    def test_zero_inputs(self, customers, churn):
        assert customer_lifetime_value(100_000, customers, churn) == 0.0


class TestComputeDerived:
    def test_all_inputs_present(self):
        derived = compute_derived(
            {
                MetricId.REVENUE: 125_000.0,
                MetricId.ORDERS: 1_250.0,
                MetricId.CUSTOMERS: 2_500.0,
                MetricId.CHURN_RATE: 5.0,
            }
        )

        assert derived.avg_order_value == pytest.approx(100.0)
        assert derived.customer_lifetime_value == pytest.approx(1_000.0)

    def test_missing_inputs(self):
        derived = compute_derived({MetricId.REVENUE: 125_000.0})
        assert derived == DerivedMetrics(avg_order_value=None, customer_lifetime_value=None)

    def test_to_dict(self):
        derived = DerivedMetrics(avg_order_value=1.5, customer_lifetime_value=None)
        assert derived.to_dict() == {"avg_order_value": 1.5, "customer_lifetime_value": None}
