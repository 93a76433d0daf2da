"""
State store registry and factory.
"""

from .cache import RedisStateStore
from .config import SimulatorConfig
from .database import PostgresStateStore
from .store import InMemoryStateStore, JsonFileStateStore, StateStore

# Registry of available backends
STORE_REGISTRY = {
    "memory": lambda config: InMemoryStateStore(),
    "file": lambda config: JsonFileStateStore(config.state_file),
    "redis": RedisStateStore,
    "postgres": PostgresStateStore,
}


def build_store(config: SimulatorConfig) -> StateStore:
    """Factory to create the state store selected by config.store_backend

    Raises:
        ValueError: If the backend is not registered
    """
    if config.store_backend not in STORE_REGISTRY:
        available = ", ".join(STORE_REGISTRY.keys())
        raise ValueError(f"Unknown store backend '{config.store_backend}'. Available: {available}")

    return STORE_REGISTRY[config.store_backend](config)


def list_backends() -> list[str]:
    return list(STORE_REGISTRY.keys())
