"""Chunk execution logic for streamed and parallel hashing.

This module provides the two executors that turn a slice plan into a digest:

- CooperativeHasher feeds one input through a single running hash state and
  suspends periodically. Its digest equals a plain single-pass digest.
- ParallelAggregator hashes each slice independently and concurrently, then
  hashes the concatenation of the per-slice digests in slice order. Its digest
  is NOT the single-pass digest of the input, even for a single slice.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from concurrent.futures import Executor
from time import perf_counter

from ...core.algorithms import HasherFactory
from ..scheduler import YieldPoint, cooperative_yield
from .definitions import DigestResult, Slice
from .planners import ChunkPlanner
from .telemetry import (
    log_chunk_progress,
    log_digest_complete,
    log_digest_plan,
    log_slice_completed,
)

ProgressCallback = Callable[[float], None]


def _hash_view(factory: HasherFactory, view: memoryview) -> bytes:
    state = factory()
    state.update(view)
    return state.digest()


class CooperativeHasher:
    """Streams one input through a running hash state, yielding periodically.

    Chunk size comes from the planner's size tiers; a suspension happens each
    time ``yield_threshold`` bytes have been absorbed since the last one.
    """

    def __init__(
        self,
        factory: HasherFactory,
        planner: ChunkPlanner | None = None,
        *,
        yield_point: YieldPoint | None = None,
        log_enabled: bool = False,
    ) -> None:
        """Initialize cooperative hasher.

        Args:
            factory: Hasher factory for the digest primitive
            planner: Chunk planner (defaults to the standard stream policy)
            yield_point: Suspension callback (defaults to an event loop yield)
            log_enabled: Emit diagnostic telemetry
        """
        self._factory = factory
        self._planner = planner or ChunkPlanner()
        self._yield_point = yield_point or cooperative_yield
        self.log_enabled = log_enabled

    async def execute(
        self,
        data: memoryview,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> DigestResult:
        """Hash ``data`` in order, suspending between chunks.

        Args:
            data: Input bytes
            on_progress: Optional callback receiving percent complete after each chunk

        Returns:
            DigestResult with the raw digest (empty digest for empty input)
        """
        total = len(data)
        if total == 0:
            return DigestResult(digest=b"")

        started = perf_counter()
        plans = self._planner.plan_stream(total)
        threshold = self._planner.policy.yield_threshold
        log_digest_plan(
            enabled=self.log_enabled,
            mode="streamed",
            total_bytes=total,
            total_slices=len(plans),
            chunk_size=self._planner.stream_chunk_size(total),
        )

        state = self._factory()
        processed = 0
        since_yield = 0
        yields = 0
        for plan in plans:
            state.update(plan.view(data))
            processed += plan.length
            since_yield += plan.length
            if on_progress is not None:
                on_progress(processed * 100.0 / total)

            if since_yield >= threshold and processed < total:
                log_chunk_progress(
                    enabled=self.log_enabled, processed_bytes=processed, total_bytes=total
                )
                await self._yield_point()
                since_yield = 0
                yields += 1

        result = DigestResult(
            digest=state.digest(),
            slices_used=len(plans),
            yields=yields,
            total_bytes=total,
        )
        log_digest_complete(
            enabled=self.log_enabled,
            mode="streamed",
            result=result,
            total_latency_ms=(perf_counter() - started) * 1000.0,
        )
        return result

    async def digest(self, data: memoryview) -> bytes:
        """Return the raw single-pass digest of ``data``."""
        return (await self.execute(data)).digest


class ParallelAggregator:
    """Fans slices out to concurrent tasks and folds their digests into one.

    Each task owns one slot of a pre-sized result list, addressed by slice
    index, so the final digest does not depend on completion order.
    """

    def __init__(
        self,
        factory: HasherFactory,
        planner: ChunkPlanner | None = None,
        *,
        yield_point: YieldPoint | None = None,
        executor: Executor | None = None,
        log_enabled: bool = False,
    ) -> None:
        """Initialize parallel aggregator.

        Args:
            factory: Hasher factory for the digest primitive
            planner: Chunk planner used for slicing
            yield_point: Suspension callback for slices streamed on the event loop
            executor: Optional executor to offload per-slice hashing to
            log_enabled: Emit diagnostic telemetry
        """
        self._factory = factory
        self._planner = planner or ChunkPlanner()
        self._yield_point = yield_point or cooperative_yield
        self._executor = executor
        self.log_enabled = log_enabled
        self._slice_hasher = CooperativeHasher(
            factory, self._planner, yield_point=self._yield_point
        )

    async def execute(self, data: memoryview, task_count: int) -> DigestResult:
        """Compute ``hash(digest(slice_0) || ... || digest(slice_k-1))``.

        Args:
            data: Input bytes
            task_count: Requested number of slices (0 = default)

        Returns:
            DigestResult with the composed raw digest (empty digest for empty input)
        """
        total = len(data)
        if total == 0:
            return DigestResult(digest=b"")

        started = perf_counter()
        plans = self._planner.plan_slices(total, task_count)
        log_digest_plan(
            enabled=self.log_enabled,
            mode="parallel",
            total_bytes=total,
            total_slices=len(plans),
        )

        slots: list[bytes | None] = [None] * len(plans)
        await asyncio.gather(*(self._run_slice(plan, data, slots) for plan in plans))

        final_state = self._factory()
        for index, slice_digest in enumerate(slots):
            if slice_digest is None:
                raise RuntimeError(f"Slice {index} finished without a digest")
            final_state.update(slice_digest)

        result = DigestResult(
            digest=final_state.digest(),
            slices_used=len(plans),
            total_bytes=total,
        )
        log_digest_complete(
            enabled=self.log_enabled,
            mode="parallel",
            result=result,
            total_latency_ms=(perf_counter() - started) * 1000.0,
        )
        return result

    async def digest(self, data: memoryview, task_count: int) -> bytes:
        """Return the raw composed digest of ``data``."""
        return (await self.execute(data, task_count)).digest

    async def _run_slice(self, plan: Slice, data: memoryview, slots: list[bytes | None]) -> None:
        slice_start = perf_counter()
        view = plan.view(data)
        if self._executor is not None:
            loop = asyncio.get_running_loop()
            slice_digest = await loop.run_in_executor(
                self._executor, _hash_view, self._factory, view
            )
        else:
            slice_digest = await self._slice_hasher.digest(view)

        slots[plan.index] = slice_digest
        log_slice_completed(
            enabled=self.log_enabled,
            slice_index=plan.index,
            start=plan.offset,
            end=plan.end,
            latency_ms=(perf_counter() - slice_start) * 1000.0,
        )
