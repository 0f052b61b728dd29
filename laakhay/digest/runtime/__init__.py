"""Runtime components: chunked executors, sessions and the task pool."""

from .chunking import (
    ChunkPlanner,
    CooperativeHasher,
    DigestResult,
    ParallelAggregator,
    SizeTier,
    Slice,
    StreamPolicy,
)
from .pool import DigestPool, PoolTask
from .scheduler import YieldPoint, cooperative_yield
from .sessions import SessionRegistry

__all__ = [
    "ChunkPlanner",
    "CooperativeHasher",
    "DigestResult",
    "ParallelAggregator",
    "SizeTier",
    "Slice",
    "StreamPolicy",
    "DigestPool",
    "PoolTask",
    "SessionRegistry",
    "YieldPoint",
    "cooperative_yield",
]
