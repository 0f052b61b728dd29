"""Chunking metadata definitions and policy structures.

This module defines the data structures used to describe how an input buffer
is partitioned, both for cooperative streaming and for parallel fan-out.
"""

from __future__ import annotations

from dataclasses import dataclass, field

KIB = 1024
MIB = 1024 * KIB


@dataclass(frozen=True)
class SizeTier:
    """Chunk size tier for streaming inputs.

    Attributes:
        max_length: Largest input length covered by this tier (inclusive, or None for unbounded)
        chunk_size: Bytes fed to the hasher per step (None means hash in one step)
    """

    max_length: int | None  # None means unbounded
    chunk_size: int | None

    def covers(self, length: int) -> bool:
        """Return True if an input of ``length`` bytes falls in this tier."""
        return self.max_length is None or length <= self.max_length


DEFAULT_SIZE_TIERS: tuple[SizeTier, ...] = (
    SizeTier(max_length=512 * KIB, chunk_size=None),
    SizeTier(max_length=10 * MIB, chunk_size=128 * KIB),
    SizeTier(max_length=None, chunk_size=256 * KIB),
)


@dataclass(frozen=True)
class StreamPolicy:
    """Streaming policy for cooperative hashing.

    Chunk size and yield frequency bound the work done between suspensions.
    Neither affects the resulting digest.

    Examples:
        # Default tiers, suspend every 2 MiB
        StreamPolicy()

        # Fixed 64 KiB chunks, suspend after every chunk
        StreamPolicy(tiers=(SizeTier(None, 64 * 1024),), yield_threshold=64 * 1024)

    Attributes:
        tiers: Ordered size tiers; the first tier covering the input length wins
        yield_threshold: Bytes processed between two suspensions
    """

    tiers: tuple[SizeTier, ...] = field(default=DEFAULT_SIZE_TIERS)
    yield_threshold: int = 2 * MIB

    def __post_init__(self) -> None:
        """Validate stream policy configuration."""
        if not self.tiers:
            raise ValueError("StreamPolicy tiers cannot be empty")
        if self.tiers[-1].max_length is not None:
            raise ValueError("StreamPolicy last tier must be unbounded")
        if self.yield_threshold <= 0:
            raise ValueError("StreamPolicy yield_threshold must be positive")
        for tier in self.tiers:
            if tier.chunk_size is not None and tier.chunk_size <= 0:
                raise ValueError("SizeTier chunk_size must be positive")

    def chunk_size_for(self, length: int) -> int | None:
        """Return the chunk size for an input of ``length`` bytes.

        Args:
            length: Input length in bytes

        Returns:
            Chunk size in bytes, or None if the input is hashed in one step
        """
        for tier in self.tiers:
            if tier.covers(length):
                return tier.chunk_size
        return self.tiers[-1].chunk_size


@dataclass(frozen=True)
class Slice:
    """Contiguous byte range of an input.

    Attributes:
        index: Zero-based ordinal of this slice in the overall plan
        offset: Start offset in bytes
        length: Number of bytes
    """

    index: int
    offset: int
    length: int

    @property
    def end(self) -> int:
        """Exclusive end offset."""
        return self.offset + self.length

    def view(self, data: memoryview) -> memoryview:
        """Return the zero-copy view of ``data`` covered by this slice."""
        return data[self.offset : self.end]


@dataclass
class DigestResult:
    """Result of a chunked or parallel digest computation.

    Attributes:
        digest: Raw digest bytes (empty for empty input)
        slices_used: Number of slices or chunks fed to the hasher
        yields: Number of cooperative suspensions performed
        total_bytes: Number of input bytes absorbed
    """

    digest: bytes
    slices_used: int = 0
    yields: int = 0
    total_bytes: int = 0
