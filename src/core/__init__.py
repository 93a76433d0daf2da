"""
Core utilities shared across the engine.
"""

from .database import PostgresConnection
from .errors import InvalidConfigurationError, KpiEngineError, OutOfOrderError
from .logger import setup_logging

__all__ = [
    "InvalidConfigurationError",
    "KpiEngineError",
    "OutOfOrderError",
    "PostgresConnection",
    "setup_logging",
]
