"""
Redis-backed state store.
"""

import json
from typing import Optional

import redis
import structlog

from src.timeseries.models import MetricId, metric_key

from .config import SimulatorConfig
from .models import SimulatorState
from .store import StateStore

logger = structlog.get_logger(__name__)


class RedisStateStore(StateStore):
    """One Redis key per metric holding the JSON-encoded state"""

    def __init__(self, config: SimulatorConfig, ttl_seconds: int | None = None):
        self.key_prefix = config.redis_key_prefix
        self.ttl = ttl_seconds
        try:
            self.redis = redis.Redis(
                host=config.redis_host,
                port=config.redis_port,
                db=config.redis_db,
                password=config.redis_password,
                decode_responses=True,
            )
            self.redis.ping()  # Test connection
            logger.info(
                "Redis state store initialized", host=config.redis_host, port=config.redis_port
            )
        except Exception as e:
            logger.error("Failed to initialize Redis", error=str(e))
            raise

    def save(self, state: SimulatorState) -> bool:
        key = self._make_key(state.metric)
        try:
            payload = json.dumps(state.to_dict())
            if self.ttl:
                self.redis.setex(key, self.ttl, payload)
            else:
                self.redis.set(key, payload)
            logger.debug("State saved to Redis", key=key)
            return True
        except Exception as e:
            logger.error("Failed to save state to Redis", key=key, error=str(e))
            return False

    def load(self, metric: MetricId | str) -> Optional[SimulatorState]:
        key = self._make_key(metric)
        try:
            data = self.redis.get(key)
            if data is None:
                return None
            return SimulatorState.from_dict(json.loads(data))
        except Exception as e:
            logger.error("Failed to load state from Redis", key=key, error=str(e))
            return None

    def close(self) -> None:
        self.redis.close()

    def _make_key(self, metric: MetricId | str) -> str:
        return f"{self.key_prefix}:{metric_key(metric)}"
