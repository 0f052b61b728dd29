"""Chunk planning logic for partitioning input buffers.

This module provides the ChunkPlanner class that splits an input of a given
length into ordered, contiguous, gap-free slices, either for parallel fan-out
(a fixed number of slices) or for cooperative streaming (tiered chunk sizes).
"""

from __future__ import annotations

from ...models.settings import DEFAULT_TASK_COUNT
from .definitions import Slice, StreamPolicy


class ChunkPlanner:
    """Plans slices for parallel and streamed hashing.

    The planner is pure: plans depend only on the input length, the requested
    task count and the stream policy.
    """

    def __init__(self, policy: StreamPolicy | None = None) -> None:
        """Initialize chunk planner.

        Args:
            policy: Streaming policy (defaults to the standard size tiers)
        """
        self._policy = policy or StreamPolicy()

    @property
    def policy(self) -> StreamPolicy:
        return self._policy

    def plan_slices(self, length: int, task_count: int = DEFAULT_TASK_COUNT) -> list[Slice]:
        """Partition ``length`` bytes into at most ``task_count`` slices.

        A task count of zero is replaced with the default. The count is clamped
        to ``length`` so no slice is empty. Every slice but the last gets
        ``length // task_count`` bytes; the last one absorbs the remainder.

        Args:
            length: Input length in bytes
            task_count: Requested number of slices

        Returns:
            List of slices covering ``[0, length)`` exactly once

        Raises:
            ValueError: If length or task_count is negative
        """
        if length < 0:
            raise ValueError("length must be non-negative")
        if task_count < 0:
            raise ValueError("task_count must be non-negative")
        if length == 0:
            return []

        count = min(task_count or DEFAULT_TASK_COUNT, length)
        base, remainder = divmod(length, count)

        slices: list[Slice] = []
        for index in range(count):
            size = base + remainder if index == count - 1 else base
            slices.append(Slice(index=index, offset=index * base, length=size))
        return slices

    def stream_chunk_size(self, length: int) -> int | None:
        """Return the streaming chunk size for ``length`` bytes (None = one step)."""
        return self._policy.chunk_size_for(length)

    def plan_stream(self, length: int) -> list[Slice]:
        """Partition ``length`` bytes into sequential streaming chunks.

        Args:
            length: Input length in bytes

        Returns:
            List of slices in processing order (empty for empty input)
        """
        if length < 0:
            raise ValueError("length must be non-negative")
        if length == 0:
            return []

        chunk_size = self.stream_chunk_size(length)
        if chunk_size is None:
            return [Slice(index=0, offset=0, length=length)]

        slices: list[Slice] = []
        offset = 0
        index = 0
        while offset < length:
            size = min(chunk_size, length - offset)
            slices.append(Slice(index=index, offset=offset, length=size))
            offset += size
            index += 1
        return slices
