"""Data models."""

from .settings import DEFAULT_TASK_COUNT, EngineSettings, PoolSettings
from .status import PoolStatus

__all__ = [
    "DEFAULT_TASK_COUNT",
    "EngineSettings",
    "PoolSettings",
    "PoolStatus",
]
