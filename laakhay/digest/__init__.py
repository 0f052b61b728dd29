"""Laakhay Digest - Chunked, parallel and incremental hashing for large buffers."""

from .api import DigestEngine
from .core import (
    DEFAULT_ALGORITHM,
    DigestError,
    HasherFactory,
    HasherState,
    PoolClosedError,
    PoolError,
    RegistryCorruptionError,
    TaskCancelledError,
    TaskTimeoutError,
    UnsupportedAlgorithmError,
    digest_hex_length,
    format_digest,
    resolve_hasher_factory,
)
from .models import DEFAULT_TASK_COUNT, EngineSettings, PoolSettings, PoolStatus
from .runtime import (
    ChunkPlanner,
    CooperativeHasher,
    DigestPool,
    DigestResult,
    ParallelAggregator,
    SessionRegistry,
    SizeTier,
    Slice,
    StreamPolicy,
    YieldPoint,
    cooperative_yield,
)

__version__ = "0.1.0"

__all__ = [
    # Facade
    "DigestEngine",
    "DigestPool",
    # Chunking
    "ChunkPlanner",
    "CooperativeHasher",
    "ParallelAggregator",
    "DigestResult",
    "SizeTier",
    "Slice",
    "StreamPolicy",
    # Sessions
    "SessionRegistry",
    # Scheduling
    "YieldPoint",
    "cooperative_yield",
    # Primitives
    "DEFAULT_ALGORITHM",
    "HasherFactory",
    "HasherState",
    "digest_hex_length",
    "format_digest",
    "resolve_hasher_factory",
    # Configuration
    "DEFAULT_TASK_COUNT",
    "EngineSettings",
    "PoolSettings",
    "PoolStatus",
    # Exceptions
    "DigestError",
    "UnsupportedAlgorithmError",
    "RegistryCorruptionError",
    "PoolError",
    "TaskCancelledError",
    "TaskTimeoutError",
    "PoolClosedError",
]
