"""Chunking layer for streamed and parallel hashing.

Architecture:
    The chunking layer consists of:
    - definitions.py: Slice, stream policy and result structures
    - planners.py: Partitioning logic (parallel slices, streaming chunks)
    - executors.py: CooperativeHasher and ParallelAggregator
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import DEFAULT_SIZE_TIERS, DigestResult, SizeTier, Slice, StreamPolicy
from .executors import CooperativeHasher, ParallelAggregator
from .planners import ChunkPlanner

__all__ = [
    "DEFAULT_SIZE_TIERS",
    "DigestResult",
    "SizeTier",
    "Slice",
    "StreamPolicy",
    "ChunkPlanner",
    "CooperativeHasher",
    "ParallelAggregator",
]
