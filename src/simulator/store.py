"""
State store interface and local implementations.

A store persists the last SimulatorState of each metric so a restarted
process resumes where it stopped instead of resetting to a baseline.
"""

import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import structlog

from src.timeseries.models import MetricId, metric_key

from .models import SimulatorState

logger = structlog.get_logger(__name__)


class StateStore(ABC):
    """Persistence contract required by the simulator

    Implementations never raise from load() or save(): load() returns None
    when nothing usable is stored and save() reports failure as False.
    """

    @abstractmethod
    def load(self, metric: MetricId | str) -> Optional[SimulatorState]:
        pass

    @abstractmethod
    def save(self, state: SimulatorState) -> bool:
        pass

    def close(self) -> None:
        """Release backend resources"""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class InMemoryStateStore(StateStore):
    """Process-local store, lost on restart"""

    def __init__(self):
        self._states: dict[str, dict] = {}
        self._lock = threading.Lock()

    def load(self, metric: MetricId | str) -> Optional[SimulatorState]:
        with self._lock:
            data = self._states.get(metric_key(metric))
        return SimulatorState.from_dict(data) if data else None

    def save(self, state: SimulatorState) -> bool:
        with self._lock:
            self._states[metric_key(state.metric)] = state.to_dict()
        return True


class JsonFileStateStore(StateStore):
    """All metric states in one JSON document on local disk

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write leaves the previous document intact.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()
        logger.info("File state store initialized", path=str(self.path))

    def load(self, metric: MetricId | str) -> Optional[SimulatorState]:
        key = metric_key(metric)
        try:
            with self._lock:
                document = self._read()
            data = document.get(key)
            return SimulatorState.from_dict(data) if data else None
        except Exception as e:
            logger.error(
                "Failed to load state from file", path=str(self.path), metric=key, error=str(e)
            )
            return None

    def save(self, state: SimulatorState) -> bool:
        key = metric_key(state.metric)
        try:
            with self._lock:
                document = self._read()
                document[key] = state.to_dict()
                self._write(document)
            logger.debug("State saved to file", path=str(self.path), metric=key)
            return True
        except Exception as e:
            logger.error(
                "Failed to save state to file", path=str(self.path), metric=key, error=str(e)
            )
            return False

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, document: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def __repr__(self) -> str:
        return f"JsonFileStateStore(path={str(self.path)!r})"
