"""
Tests for observation models.
"""

from src.timeseries.models import MetricId, Observation, metric_key
from tests.helpers import START


class TestObservation:
    def test_dict_form(self):
        obs = Observation(START, 125_000.0)

        assert obs.to_dict() == {"timestamp": "2025-01-01T00:00:00+00:00", "value": 125_000.0}
        assert Observation.from_dict(obs.to_dict()) == obs


class TestMetricKey:
    def test_enum_and_string(self):
        assert metric_key(MetricId.CONVERSION_RATE) == "conversion_rate"
        assert metric_key("nps") == "nps"
