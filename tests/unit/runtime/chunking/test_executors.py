"""Unit tests for streamed and parallel chunk execution."""

from __future__ import annotations

import asyncio
import hashlib
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from laakhay.digest.runtime.chunking import (
    ChunkPlanner,
    CooperativeHasher,
    ParallelAggregator,
    SizeTier,
    StreamPolicy,
)

DATA = random.Random(7).randbytes(10_000)


def composed_md5(data: bytes, task_count: int) -> bytes:
    """Reference two-level digest built from the planner's slices."""
    outer = hashlib.md5()
    for plan in ChunkPlanner().plan_slices(len(data), task_count):
        outer.update(hashlib.md5(data[plan.offset : plan.end]).digest())
    return outer.digest()


class YieldCounter:
    """Yield point that counts suspensions."""

    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1
        await asyncio.sleep(0)


class TestCooperativeHasher:
    """Test CooperativeHasher functionality."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chunk_size", [1, 7, 64, 1000, 4096, 10_000, 50_000])
    async def test_digest_independent_of_chunk_size(self, chunk_size):
        """Test that any chunk size yields the single-pass digest."""
        policy = StreamPolicy(tiers=(SizeTier(None, chunk_size),), yield_threshold=chunk_size)
        hasher = CooperativeHasher(hashlib.md5, ChunkPlanner(policy))

        assert await hasher.digest(memoryview(DATA)) == hashlib.md5(DATA).digest()

    @pytest.mark.asyncio
    async def test_yields_at_threshold(self):
        """Test that suspensions happen every yield_threshold bytes."""
        policy = StreamPolicy(tiers=(SizeTier(None, 10),), yield_threshold=25)
        counter = YieldCounter()
        hasher = CooperativeHasher(hashlib.md5, ChunkPlanner(policy), yield_point=counter)

        result = await hasher.execute(memoryview(bytes(100)))

        # 30, 60 and 90 bytes cross the threshold; the final chunk does not yield
        assert counter.calls == 3
        assert result.yields == 3
        assert result.slices_used == 10
        assert result.total_bytes == 100
        assert result.digest == hashlib.md5(bytes(100)).digest()

    @pytest.mark.asyncio
    async def test_small_input_never_yields(self):
        """Test that unchunked inputs are hashed without suspending."""
        counter = YieldCounter()
        hasher = CooperativeHasher(hashlib.md5, yield_point=counter)

        result = await hasher.execute(memoryview(DATA))

        assert counter.calls == 0
        assert result.slices_used == 1

    @pytest.mark.asyncio
    async def test_empty_input_skips_hashing(self):
        """Test that empty input returns an empty digest without a hasher."""

        def factory():
            raise AssertionError("hasher must not be created for empty input")

        hasher = CooperativeHasher(factory)

        result = await hasher.execute(memoryview(b""))

        assert result.digest == b""
        assert result.slices_used == 0

    @pytest.mark.asyncio
    async def test_progress_reaches_100(self):
        """Test that progress is reported per chunk and ends at 100."""
        policy = StreamPolicy(tiers=(SizeTier(None, 4),), yield_threshold=4)
        hasher = CooperativeHasher(hashlib.md5, ChunkPlanner(policy))
        progress: list[float] = []

        await hasher.execute(memoryview(bytes(10)), on_progress=progress.append)

        assert progress == [40.0, 80.0, 100.0]


class TestParallelAggregator:
    """Test ParallelAggregator functionality."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("task_count", [1, 2, 3, 4, 9])
    async def test_composed_digest(self, task_count):
        """Test hash(digest(slice_0) || ... || digest(slice_k-1))."""
        aggregator = ParallelAggregator(hashlib.md5)

        digest = await aggregator.digest(memoryview(DATA), task_count)

        assert digest == composed_md5(DATA, task_count)

    @pytest.mark.asyncio
    async def test_single_slice_still_composes(self):
        """Test that one slice is hash(digest(input)), not digest(input)."""
        aggregator = ParallelAggregator(hashlib.md5)

        digest = await aggregator.digest(memoryview(b"abc"), 1)

        assert digest == hashlib.md5(hashlib.md5(b"abc").digest()).digest()
        assert digest != hashlib.md5(b"abc").digest()

    @pytest.mark.asyncio
    async def test_deterministic_under_reordered_completion(self):
        """Test that slot order, not completion order, drives the result."""
        # Every slice suspends after each byte, so tasks interleave freely
        policy = StreamPolicy(tiers=(SizeTier(None, 1),), yield_threshold=1)
        aggregator = ParallelAggregator(hashlib.md5, ChunkPlanner(policy))
        data = bytes(range(10)) + bytes(90)

        results = {await aggregator.digest(memoryview(data), 4) for _ in range(3)}

        assert results == {composed_md5(data, 4)}

    @pytest.mark.asyncio
    async def test_executor_offload_matches_inline(self):
        """Test that offloading slices to threads gives the same digest."""
        inline = ParallelAggregator(hashlib.md5)
        with ThreadPoolExecutor(max_workers=4) as executor:
            offloaded = ParallelAggregator(hashlib.md5, executor=executor)
            threaded = await offloaded.digest(memoryview(DATA), 4)

        assert threaded == await inline.digest(memoryview(DATA), 4)

    @pytest.mark.asyncio
    async def test_clamps_task_count(self):
        """Test that more tasks than bytes uses one slice per byte."""
        aggregator = ParallelAggregator(hashlib.md5)

        result = await aggregator.execute(memoryview(b"ab"), 16)

        assert result.slices_used == 2
        assert result.digest == composed_md5(b"ab", 16)

    @pytest.mark.asyncio
    async def test_empty_input(self):
        """Test that empty input short-circuits."""
        result = await ParallelAggregator(hashlib.md5).execute(memoryview(b""), 4)

        assert result.digest == b""
