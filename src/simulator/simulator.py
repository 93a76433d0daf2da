"""
Bounded random walk simulation of business metrics.

One tick draws a relative step uniformly from [-max_step_fraction,
+max_step_fraction], applies it to the current value and clamps the result
into [min_value, max_value].
"""

import random
import threading
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from src.core.errors import InvalidConfigurationError
from src.timeseries.models import MetricId, Observation, metric_key

from .config import SimulatorConfig
from .derived import compute_derived
from .models import MetricBounds, SimulatorState
from .store import InMemoryStateStore, StateStore

logger = structlog.get_logger(__name__)


class MetricSimulator:
    """Owns the per-metric SimulatorState map and advances it one tick at a time

    Ticks for the same metric are serialized by a per-metric lock; ticks for
    different metrics run independently.
    """

    def __init__(
        self,
        bounds: Mapping[MetricId, MetricBounds],
        baselines: Mapping[MetricId, float],
        store: StateStore | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.bounds = dict(bounds)
        self.baselines = dict(baselines)
        self.store = store if store is not None else InMemoryStateStore()
        self.rng = rng if rng is not None else random.Random()
        self._clock = clock or (lambda: datetime.now(UTC))

        self.states: dict[MetricId, SimulatorState] = {}
        self._locks = {metric: threading.Lock() for metric in self.bounds}

        logger.info(
            "Simulator initialized",
            metrics=[metric_key(m) for m in self.bounds],
            store=type(self.store).__name__,
        )

    @classmethod
    def from_config(cls, config: SimulatorConfig, store: StateStore | None = None):
        bounds = {m: config.bounds[m] for m in config.metrics}
        baselines = {m: config.baselines[m] for m in config.metrics}
        rng = random.Random(config.seed) if config.seed is not None else None
        return cls(bounds, baselines, store=store, rng=rng)

    def tick(
        self, state: SimulatorState, bounds: MetricBounds, now: datetime | None = None
    ) -> tuple[SimulatorState, Observation]:
        """Compute the next value of a metric

        Does not touch self.states or the store; the caller decides what to do
        with the new state and the observation.

        Args:
            state: Current state of the metric
            bounds: Range and step limit to apply
            now: Timestamp of the new observation (defaults to the clock)

        Returns:
            (new_state, observation)
        """
        now = now or self._clock()

        step = self.rng.uniform(-bounds.max_step_fraction, bounds.max_step_fraction)
        candidate = state.current_value + step * state.current_value
        value = bounds.clamp(candidate)

        if value != candidate:
            logger.debug(
                "Tick clamped",
                metric=metric_key(state.metric),
                candidate=round(candidate, 4),
                value=value,
            )

        new_state = SimulatorState(metric=state.metric, current_value=value, last_updated=now)
        return new_state, Observation(timestamp=now, value=value)

    def load_or_seed(self, metric: MetricId) -> SimulatorState:
        """Resume a metric from the store, or seed it from its baseline"""
        bounds = self._bounds_for(metric)

        state = self.store.load(metric)
        if state is None:
            state = SimulatorState(
                metric=metric,
                current_value=float(self.baselines[metric]),
                last_updated=self._clock(),
            )
            logger.info(
                "Seeded metric from baseline", metric=metric_key(metric), value=state.current_value
            )
        else:
            clamped = bounds.clamp(state.current_value)
            if clamped != state.current_value:
                logger.warning(
                    "Stored value outside bounds, clamping",
                    metric=metric_key(metric),
                    stored=state.current_value,
                    clamped=clamped,
                )
                state = SimulatorState(
                    metric=metric, current_value=clamped, last_updated=state.last_updated
                )
            logger.info(
                "Resumed metric from store", metric=metric_key(metric), value=state.current_value
            )

        self.states[metric] = state
        return state

    def advance(self, metric: MetricId, now: datetime | None = None) -> Observation:
        """Tick one metric and record the new state in memory"""
        bounds = self._bounds_for(metric)
        with self._locks[metric]:
            state = self.states.get(metric) or self.load_or_seed(metric)
            new_state, obs = self.tick(state, bounds, now=now)
            self.states[metric] = new_state

        logger.debug("Metric advanced", metric=metric_key(metric), value=obs.value)
        return obs

    def persist(self, metric: MetricId) -> bool:
        """Save the in-memory state of a metric

        A failed save leaves the in-memory state untouched; the next tick
        continues from it regardless.
        """
        state = self.states.get(metric)
        if state is None:
            return False

        saved = self.store.save(state)
        if not saved:
            logger.error("Failed to persist simulator state", metric=metric_key(metric))
        return saved

    def current_values(self) -> dict[MetricId, float]:
        return {metric: state.current_value for metric, state in self.states.items()}

    def snapshot(self) -> dict[str, Any]:
        """Primitive values plus derived metrics recomputed from them"""
        values = self.current_values()
        last_updated = max((s.last_updated for s in self.states.values()), default=None)
        return {
            "metrics": {metric_key(m): v for m, v in values.items()},
            "derived": compute_derived(values).to_dict(),
            "last_updated": last_updated.isoformat() if last_updated else None,
        }

    def _bounds_for(self, metric: MetricId) -> MetricBounds:
        if metric not in self.bounds:
            raise InvalidConfigurationError(
                f"No bounds configured for metric '{metric_key(metric)}'"
            )
        return self.bounds[metric]
