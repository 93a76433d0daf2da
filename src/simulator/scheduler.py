"""
Fixed-interval driver for the simulator.

The simulator itself has no timers. TickScheduler is the external caller
that advances each metric, keeps its in-memory series, persists state and
optionally publishes observations.
"""

import time
from datetime import UTC, datetime, timedelta

import structlog

from src.core.errors import OutOfOrderError
from src.timeseries.models import MetricId, Observation, metric_key
from src.timeseries.series import TimeSeries

from .backends import build_store
from .config import SimulatorConfig
from .publisher import ObservationPublisher
from .simulator import MetricSimulator
from .store import StateStore

logger = structlog.get_logger(__name__)


class TickScheduler:
    """Ticks every configured metric once per interval"""

    def __init__(
        self,
        config: SimulatorConfig,
        simulator: MetricSimulator | None = None,
        store: StateStore | None = None,
        publisher: ObservationPublisher | None = None,
    ):
        self.config = config
        if simulator is not None:
            self.simulator = simulator
            self.store = simulator.store
        else:
            self.store = store if store is not None else build_store(config)
            self.simulator = MetricSimulator.from_config(config, store=self.store)

        if publisher is None and config.kafka_enabled:
            publisher = ObservationPublisher(config)
        self.publisher = publisher

        self.series: dict[MetricId, TimeSeries] = {m: TimeSeries(m) for m in config.metrics}

        self.stats = {
            "ticks": 0,
            "observations": 0,
            "out_of_order": 0,
            "persist_failures": 0,
            "publish_failures": 0,
        }

        logger.info(
            "Scheduler initialized",
            interval_seconds=config.tick_interval_seconds,
            metrics=[metric_key(m) for m in config.metrics],
            store=repr(self.store),
            kafka=self.publisher is not None,
        )

    def tick_all(self, now: datetime | None = None) -> dict[MetricId, Observation]:
        """Advance every metric once

        A late observation is dropped and a failed save is only counted; in
        both cases the remaining metrics are still ticked. State is saved
        before the append so the store follows the simulator even when the
        observation is dropped.
        """
        now = now or datetime.now(UTC)
        accepted = {}

        for metric in self.config.metrics:
            obs = self.simulator.advance(metric, now=now)
            if not self.simulator.persist(metric):
                self.stats["persist_failures"] += 1

            try:
                self.series[metric].append(obs)
            except OutOfOrderError as e:
                self.stats["out_of_order"] += 1
                logger.warning(
                    "Dropping out-of-order observation",
                    metric=metric_key(metric),
                    timestamp=e.timestamp.isoformat(),
                    last_timestamp=e.last_timestamp.isoformat(),
                )
                continue

            self.series[metric].truncate(self.config.retention_points)
            accepted[metric] = obs

            if self.publisher and not self.publisher.publish(metric, obs):
                self.stats["publish_failures"] += 1

        if self.publisher:
            self.publisher.flush()

        self.stats["ticks"] += 1
        self.stats["observations"] += len(accepted)
        return accepted

    def backfill(self, points: int, interval_seconds: float, end: datetime | None = None) -> int:
        """Generate `points` historical ticks spaced interval_seconds apart, ending at `end`

        Returns:
            Number of ticks generated
        """
        end = end or datetime.now(UTC)
        start = end - timedelta(seconds=interval_seconds * (points - 1))

        logger.info(
            "Starting backfill",
            points=points,
            interval_seconds=interval_seconds,
            start=start.isoformat(),
            end=end.isoformat(),
        )

        for k in range(points):
            self.tick_all(now=start + timedelta(seconds=interval_seconds * k))

        logger.info("Backfill completed", points=points, **self.stats)
        return points

    def snapshot(self) -> dict:
        return self.simulator.snapshot()

    def run(self, duration_seconds: float | None = None):
        """Tick continuously or for a specified duration

        Args:
            duration_seconds: Optional duration in seconds. If None, runs indefinitely.
        """
        logger.info(
            "Starting scheduler",
            interval_seconds=self.config.tick_interval_seconds,
            duration=duration_seconds if duration_seconds else "indefinite",
        )

        start_time = time.time()

        try:
            while True:
                self.tick_all()
                logger.info("Tick completed", **self.snapshot()["metrics"])

                elapsed = time.time() - start_time
                if duration_seconds and elapsed >= duration_seconds:
                    logger.info("Duration limit reached", duration_seconds=duration_seconds)
                    break

                time.sleep(self.config.tick_interval_seconds)

        except KeyboardInterrupt:
            logger.info("Received interrupt signal, stopping scheduler")

        except Exception as e:
            logger.error("Scheduler error", error=str(e), exc_info=True)
            raise

        finally:
            self.close()
            logger.info(
                "Scheduler stopped", elapsed_sec=round(time.time() - start_time, 1), **self.stats
            )

    def close(self):
        if self.publisher:
            self.publisher.close()
        self.store.close()
