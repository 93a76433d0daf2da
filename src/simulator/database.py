"""
PostgreSQL-backed state store.

Expects a table of the form:

    CREATE TABLE simulator_state (
        metric        TEXT PRIMARY KEY,
        current_value DOUBLE PRECISION NOT NULL,
        last_updated  TIMESTAMPTZ NOT NULL
    );
"""

from typing import Optional

import structlog

from src.core.database import PostgresConnection
from src.timeseries.models import MetricId, metric_key

from .config import SimulatorConfig
from .models import SimulatorState
from .store import StateStore

logger = structlog.get_logger(__name__)


class PostgresStateStore(PostgresConnection, StateStore):
    """Upserts one row per metric into simulator_state"""

    def __init__(self, config: SimulatorConfig, table: str = "simulator_state"):
        super().__init__(
            host=config.postgres_host,
            port=config.postgres_port,
            database=config.postgres_database,
            user=config.postgres_user,
            password=config.postgres_password,
        )
        self.table = table

        if not self.check_health():
            logger.error("PostgreSQL health check failed", host=config.postgres_host)
            self.close()
            raise ConnectionError(f"PostgreSQL at {config.postgres_host} is not healthy")

    def save(self, state: SimulatorState) -> bool:
        query = f"""
            INSERT INTO {self.table} (metric, current_value, last_updated)
            VALUES (%(metric)s, %(current_value)s, %(last_updated)s)
            ON CONFLICT (metric) DO UPDATE SET
                current_value = EXCLUDED.current_value,
                last_updated = EXCLUDED.last_updated
        """
        params = {
            "metric": metric_key(state.metric),
            "current_value": state.current_value,
            "last_updated": state.last_updated,
        }
        try:
            with self.get_cursor() as cursor:
                cursor.execute(query, params)
            logger.debug("State saved to PostgreSQL", metric=params["metric"])
            return True
        except Exception as e:
            logger.error(
                "Failed to save state to PostgreSQL", metric=params["metric"], error=str(e)
            )
            return False

    def load(self, metric: MetricId | str) -> Optional[SimulatorState]:
        key = metric_key(metric)
        query = f"""
            SELECT metric, current_value, last_updated
            FROM {self.table}
            WHERE metric = %s
        """
        try:
            with self.get_cursor() as cursor:
                cursor.execute(query, (key,))
                row = cursor.fetchone()
            if row is None:
                return None
            name, value, last_updated = row
            return SimulatorState.from_dict(
                {"metric": name, "current_value": value, "last_updated": last_updated.isoformat()}
            )
        except Exception as e:
            logger.error("Failed to load state from PostgreSQL", metric=key, error=str(e))
            return None
