"""
Tests for TickScheduler.
"""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest

from src.simulator.config import SimulatorConfig
from src.simulator.scheduler import TickScheduler
from src.simulator.simulator import MetricSimulator
from src.simulator.store import InMemoryStateStore
from src.timeseries.models import MetricId
from tests.helpers import START


class TestTickAll:
    """Tests for one scheduler tick across all metrics."""

    def test_every_metric_advanced(self, simulator_config):
        scheduler = TickScheduler(simulator_config)

        accepted = scheduler.tick_all(now=START)

        assert set(accepted) == set(MetricId)
        for metric, obs in accepted.items():
            assert obs.timestamp == START
            assert scheduler.series[metric].last == obs
        assert scheduler.stats["ticks"] == 1
        assert scheduler.stats["observations"] == len(MetricId)

    def test_state_persisted(self, simulator_config):
        store = InMemoryStateStore()
        scheduler = TickScheduler(simulator_config, store=store)

        accepted = scheduler.tick_all(now=START)

        assert store.load(MetricId.REVENUE).current_value == accepted[MetricId.REVENUE].value

    def test_retention_applied(self):
        config = SimulatorConfig(retention_points=3, seed=1)
        scheduler = TickScheduler(config)

        for i in range(10):
            scheduler.tick_all(now=START + timedelta(minutes=i))

        assert len(scheduler.series[MetricId.ORDERS]) == 3
        assert scheduler.series[MetricId.ORDERS].last.timestamp == START + timedelta(minutes=9)

    def test_out_of_order_tick_dropped(self, simulator_config):
        """A late tick is counted and skipped; the series keeps its last point."""
        scheduler = TickScheduler(simulator_config)
        scheduler.tick_all(now=START + timedelta(minutes=5))

        accepted = scheduler.tick_all(now=START)

        assert accepted == {}
        assert scheduler.stats["out_of_order"] == len(MetricId)
        assert len(scheduler.series[MetricId.REVENUE]) == 1

    def test_dropped_tick_still_persisted(self, simulator_config):
        """The store follows the simulator when a late observation is dropped."""
        store = InMemoryStateStore()
        scheduler = TickScheduler(simulator_config, store=store)
        scheduler.tick_all(now=START + timedelta(minutes=5))

        scheduler.tick_all(now=START)

        for metric in MetricId:
            assert store.load(metric) == scheduler.simulator.states[metric]
        assert store.load(MetricId.REVENUE).last_updated == START

    def test_persist_failure_counted(self, simulator_config):
        store = MagicMock()
        store.load.return_value = None
        store.save.return_value = False
        scheduler = TickScheduler(simulator_config, store=store)

        accepted = scheduler.tick_all(now=START)

        assert len(accepted) == len(MetricId)
        assert scheduler.stats["persist_failures"] == len(MetricId)

    def test_publishes_each_observation(self, simulator_config):
        publisher = MagicMock()
        publisher.publish.return_value = True
        scheduler = TickScheduler(simulator_config, publisher=publisher)

        scheduler.tick_all(now=START)

        assert publisher.publish.call_count == len(MetricId)
        publisher.flush.assert_called_once()

    def test_publish_failure_counted(self, simulator_config):
        publisher = MagicMock()
        publisher.publish.return_value = False
        scheduler = TickScheduler(simulator_config, publisher=publisher)

        scheduler.tick_all(now=START)

        assert scheduler.stats["publish_failures"] == len(MetricId)

    @patch("src.simulator.scheduler.ObservationPublisher")
    def test_kafka_enabled_builds_publisher(self, mock_publisher_cls):
        config = SimulatorConfig(kafka_enabled=True)

        scheduler = TickScheduler(config)

        mock_publisher_cls.assert_called_once_with(config)
        assert scheduler.publisher is mock_publisher_cls.return_value

    def test_injected_simulator_store_used(self, simulator_config):
        store = InMemoryStateStore()
        simulator = MetricSimulator.from_config(simulator_config, store=store)

        scheduler = TickScheduler(simulator_config, simulator=simulator)

        assert scheduler.store is store


class TestBackfill:
    def test_backfill_spacing(self, simulator_config):
        scheduler = TickScheduler(simulator_config)
        end = START + timedelta(hours=1)

        generated = scheduler.backfill(points=5, interval_seconds=300, end=end)

        assert generated == 5
        timestamps = [p.timestamp for p in scheduler.series[MetricId.REVENUE]]
        assert timestamps[0] == end - timedelta(minutes=20)
        assert timestamps[-1] == end
        assert all(b - a == timedelta(minutes=5) for a, b in zip(timestamps, timestamps[1:]))

    def test_snapshot_after_backfill(self, simulator_config):
        scheduler = TickScheduler(simulator_config)
        scheduler.backfill(points=3, interval_seconds=60, end=START)

        snapshot = scheduler.snapshot()

        assert set(snapshot["metrics"]) == {m.value for m in MetricId}
        assert snapshot["last_updated"] == START.isoformat()
        metrics = snapshot["metrics"]
        assert snapshot["derived"]["avg_order_value"] == metrics["revenue"] / metrics["orders"]


class TestRun:
    @patch("src.simulator.scheduler.time")
    def test_runs_for_duration(self, mock_time, simulator_config):
        mock_time.time.side_effect = [0.0, 0.5, 2.0, 3.0]
        store = MagicMock(wraps=InMemoryStateStore())
        scheduler = TickScheduler(simulator_config, store=store)

        scheduler.run(duration_seconds=1)

        assert scheduler.stats["ticks"] == 2
        mock_time.sleep.assert_called_once_with(simulator_config.tick_interval_seconds)
        store.close.assert_called_once()

    @patch("src.simulator.scheduler.time")
    def test_keyboard_interrupt_stops_cleanly(self, mock_time, simulator_config):
        mock_time.time.return_value = 0.0
        publisher = MagicMock()
        scheduler = TickScheduler(simulator_config, publisher=publisher)
        scheduler.tick_all = MagicMock(side_effect=KeyboardInterrupt)

        scheduler.run()

        publisher.close.assert_called_once()

    @patch("src.simulator.scheduler.time")
    def test_error_propagates_after_close(self, mock_time, simulator_config):
        mock_time.time.return_value = 0.0
        publisher = MagicMock()
        scheduler = TickScheduler(simulator_config, publisher=publisher)
        scheduler.tick_all = MagicMock(side_effect=RuntimeError("disk full"))

        with pytest.raises(RuntimeError, match="disk full"):
            scheduler.run()

        publisher.close.assert_called_once()
