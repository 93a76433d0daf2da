"""
Tests for the Redis state store.
"""

import json
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from src.simulator.cache import RedisStateStore
from src.simulator.config import SimulatorConfig
from src.simulator.models import SimulatorState
from src.timeseries.models import MetricId

STATE = SimulatorState(
    metric=MetricId.CUSTOMERS,
    current_value=2_851.0,
    last_updated=datetime(2025, 2, 1, 8, 0, tzinfo=UTC),
)


@pytest.fixture
def redis_config():
    return SimulatorConfig(store_backend="redis", redis_host="cache", redis_port=6380)


class TestRedisStateStore:
    """Tests for RedisStateStore with a mocked client."""

    @patch("src.simulator.cache.redis.Redis")
    def test_initialization(self, mock_redis_cls, redis_config):
        store = RedisStateStore(redis_config)

        mock_redis_cls.assert_called_once_with(
            host="cache", port=6380, db=0, password=None, decode_responses=True
        )
        mock_redis_cls.return_value.ping.assert_called_once()
        assert store.key_prefix == "kpi:state"

    @patch("src.simulator.cache.redis.Redis")
    def test_initialization_failure(self, mock_redis_cls, redis_config):
        mock_redis_cls.return_value.ping.side_effect = Exception("Connection refused")

        with pytest.raises(Exception, match="Connection refused"):
            RedisStateStore(redis_config)

    @patch("src.simulator.cache.redis.Redis")
    def test_save_without_ttl(self, mock_redis_cls, redis_config):
        client = mock_redis_cls.return_value
        store = RedisStateStore(redis_config)

        assert store.save(STATE) is True

        key, payload = client.set.call_args.args
        assert key == "kpi:state:customers"
        assert json.loads(payload) == STATE.to_dict()
        client.setex.assert_not_called()

    @patch("src.simulator.cache.redis.Redis")
    def test_save_with_ttl(self, mock_redis_cls, redis_config):
        client = mock_redis_cls.return_value
        store = RedisStateStore(redis_config, ttl_seconds=3600)

        store.save(STATE)

        key, ttl, _ = client.setex.call_args.args
        assert key == "kpi:state:customers"
        assert ttl == 3600

    @patch("src.simulator.cache.redis.Redis")
    def test_save_failure(self, mock_redis_cls, redis_config):
        mock_redis_cls.return_value.set.side_effect = Exception("READONLY")

        assert RedisStateStore(redis_config).save(STATE) is False

    @patch("src.simulator.cache.redis.Redis")
    def test_load(self, mock_redis_cls, redis_config):
        client = mock_redis_cls.return_value
        client.get.return_value = json.dumps(STATE.to_dict())

        loaded = RedisStateStore(redis_config).load(MetricId.CUSTOMERS)

        assert loaded == STATE
        client.get.assert_called_once_with("kpi:state:customers")

    @patch("src.simulator.cache.redis.Redis")
    def test_load_missing(self, mock_redis_cls, redis_config):
        mock_redis_cls.return_value.get.return_value = None

        assert RedisStateStore(redis_config).load(MetricId.CUSTOMERS) is None

    @patch("src.simulator.cache.redis.Redis")
    def test_load_failure(self, mock_redis_cls, redis_config):
        """Connection errors and undecodable payloads both load as None."""
        client = mock_redis_cls.return_value
        store = RedisStateStore(redis_config)

        client.get.side_effect = Exception("timeout")
        assert store.load(MetricId.CUSTOMERS) is None

        client.get.side_effect = None
        client.get.return_value = "garbage"
        assert store.load(MetricId.CUSTOMERS) is None

    @patch("src.simulator.cache.redis.Redis")
    def test_close(self, mock_redis_cls, redis_config):
        RedisStateStore(redis_config).close()
        mock_redis_cls.return_value.close.assert_called_once()
