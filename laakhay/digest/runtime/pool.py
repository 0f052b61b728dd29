"""Digest task pool for hashing many independent inputs.

The DigestPool queues digest jobs, runs a bounded number of them at once on
the event loop and hands results back by task id.

Architecture:
    - Pending jobs live in a priority heap (higher priority first, FIFO within
      a priority); cancelled pending jobs are skipped lazily on dispatch
    - Each running job is an asyncio task streaming its input through a
      CooperativeHasher, so large inputs never block the loop for long
    - Every job has a future that outlives the job; result() awaits it through
      asyncio.shield so a waiter timing out does not silently kill the job

Scheduling Policy:
    - Inputs up to ``large_input_threshold`` are hashed in one step
    - Larger inputs are hashed ``chunk_size`` bytes at a time with a
      suspension and a progress callback after every chunk

See Also:
    - CooperativeHasher: Streaming executor used for every job
    - PoolSettings: Pool configuration
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from time import perf_counter

from ..core.algorithms import DEFAULT_ALGORITHM, HasherFactory, resolve_hasher_factory
from ..core.exceptions import PoolClosedError, PoolError, TaskCancelledError, TaskTimeoutError
from ..core.formatting import format_digest
from ..models.settings import PoolSettings
from ..models.status import PoolStatus
from .chunking import ChunkPlanner, CooperativeHasher, SizeTier, StreamPolicy
from .chunking.executors import ProgressCallback
from .scheduler import YieldPoint
from .telemetry import log_pool_error, log_pool_event

BatchProgressCallback = Callable[[int, int], None]


@dataclass
class PoolTask:
    """A queued or running digest job."""

    task_id: str
    data: memoryview
    length: int | None
    priority: int
    future: asyncio.Future[str]
    on_progress: ProgressCallback | None = None
    runner: asyncio.Task[None] | None = None
    submitted_at: float = field(default_factory=perf_counter)


class DigestPool:
    """Bounded-concurrency queue of digest jobs.

    Example:
        >>> async with DigestPool() as pool:
        ...     digest = await pool.calculate(b"abc")
        ...     digests = await pool.calculate_batch([b"a", b"b"], length=16)
    """

    def __init__(
        self,
        algorithm: str | HasherFactory = DEFAULT_ALGORITHM,
        settings: PoolSettings | None = None,
        *,
        yield_point: YieldPoint | None = None,
        log_enabled: bool = False,
    ) -> None:
        """Initialize the pool.

        Args:
            algorithm: Digest algorithm name or hasher factory
            settings: Pool settings (defaults to PoolSettings())
            yield_point: Suspension callback used between chunks of large inputs
            log_enabled: Emit diagnostic telemetry
        """
        self._settings = settings or PoolSettings()
        policy = StreamPolicy(
            tiers=(
                SizeTier(max_length=self._settings.large_input_threshold, chunk_size=None),
                SizeTier(max_length=None, chunk_size=self._settings.chunk_size),
            ),
            yield_threshold=self._settings.chunk_size,
        )
        self._hasher = CooperativeHasher(
            resolve_hasher_factory(algorithm),
            ChunkPlanner(policy),
            yield_point=yield_point,
        )
        self.log_enabled = log_enabled

        self._pending: list[tuple[int, int, str]] = []
        self._sequence = itertools.count()
        self._queued: dict[str, PoolTask] = {}
        self._active: dict[str, PoolTask] = {}
        self._futures: dict[str, asyncio.Future[str]] = {}
        self._closed = False

    @property
    def settings(self) -> PoolSettings:
        return self._settings

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(
        self,
        data: bytes | bytearray | memoryview,
        *,
        length: int | None = None,
        priority: int = 0,
        on_progress: ProgressCallback | None = None,
        task_id: str | None = None,
    ) -> str:
        """Queue a digest job.

        Must be called from a running event loop. Every submitted id should be
        collected once with result(); the pool keeps its future until then.

        Args:
            data: Input bytes
            length: Hex characters to keep (None = full digest)
            priority: Higher values run first
            on_progress: Optional callback receiving percent complete
            task_id: Explicit task id (default: random UUID)

        Returns:
            Task id

        Raises:
            PoolClosedError: If the pool has been closed
            PoolError: If ``task_id`` is already in use
        """
        if self._closed:
            raise PoolClosedError("Pool is closed")

        if task_id is None:
            task_id = str(uuid.uuid4())
        if task_id in self._futures:
            raise PoolError(f"Task '{task_id}' already exists", task_id=task_id)

        view = memoryview(data)
        future: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        task = PoolTask(
            task_id=task_id,
            data=view,
            length=length,
            priority=priority,
            future=future,
            on_progress=on_progress,
        )
        self._futures[task_id] = future
        self._queued[task_id] = task
        heapq.heappush(self._pending, (-priority, next(self._sequence), task_id))
        log_pool_event(
            enabled=self.log_enabled, event="pool_task_submitted", task_id=task_id, priority=priority
        )

        self._dispatch()
        return task_id

    async def result(self, task_id: str, timeout: float | None = None) -> str:
        """Wait for a job's digest.

        Args:
            task_id: Id returned by submit()
            timeout: Seconds to wait (None = settings.default_timeout)

        Returns:
            Formatted digest ("" for empty input)

        Raises:
            PoolError: If the id is unknown or was already collected
            TaskTimeoutError: If the job does not finish in time (it is cancelled)
            TaskCancelledError: If the job was cancelled
            PoolClosedError: If the pool was closed before the job finished
        """
        future = self._futures.get(task_id)
        if future is None:
            raise PoolError(f"Unknown task '{task_id}'", task_id=task_id)

        wait = timeout if timeout is not None else self._settings.default_timeout
        try:
            return await asyncio.wait_for(asyncio.shield(future), wait)
        except TimeoutError:
            self.cancel_task(task_id)
            raise TaskTimeoutError(
                f"Digest task timed out after {wait}s", task_id=task_id, timeout=wait or 0.0
            ) from None
        except asyncio.CancelledError:
            if not future.cancelled():
                raise
            if self._closed:
                raise PoolClosedError("Pool closed before task finished", task_id=task_id) from None
            raise TaskCancelledError("Task cancelled", task_id=task_id) from None
        finally:
            if future.done():
                self._futures.pop(task_id, None)

    async def calculate(
        self,
        data: bytes | bytearray | memoryview,
        length: int | None = None,
        timeout: float | None = None,
        on_progress: ProgressCallback | None = None,
        priority: int = 0,
    ) -> str:
        """Submit a job and wait for its digest."""
        task_id = self.submit(data, length=length, priority=priority, on_progress=on_progress)
        return await self.result(task_id, timeout=timeout)

    async def calculate_batch(
        self,
        items: Iterable[bytes | bytearray | memoryview],
        length: int | None = None,
        on_progress: BatchProgressCallback | None = None,
    ) -> list[str]:
        """Digest many inputs; results are returned in input order.

        Earlier items get higher priority so the batch starts in input order.

        Args:
            items: Inputs to hash
            length: Hex characters to keep (None = full digest)
            on_progress: Optional callback receiving (completed, total)

        Returns:
            Digests, one per input, in input order
        """
        inputs = list(items)
        total = len(inputs)
        completed = 0

        async def run(index: int, data: bytes | bytearray | memoryview) -> str:
            nonlocal completed
            digest = await self.calculate(data, length=length, priority=total - index)
            completed += 1
            if on_progress is not None:
                on_progress(completed, total)
            return digest

        return list(await asyncio.gather(*(run(i, data) for i, data in enumerate(inputs))))

    def cancel_task(self, task_id: str) -> bool:
        """Cancel a pending or running job.

        Returns:
            True if the job was still pending or running
        """
        task = self._queued.pop(task_id, None) or self._active.get(task_id)
        if task is None:
            return False

        if task.runner is not None:
            task.runner.cancel()
        task.future.cancel()
        log_pool_event(enabled=self.log_enabled, event="pool_task_cancelled", task_id=task_id)
        return True

    def status(self) -> PoolStatus:
        """Snapshot of pool occupancy."""
        return PoolStatus(
            pool_size=self._settings.pool_size,
            max_concurrent_tasks=self._settings.concurrency_limit,
            active_tasks=len(self._active),
            pending_tasks=len(self._queued),
            closed=self._closed,
        )

    async def close(self) -> None:
        """Cancel all outstanding jobs and reject further submissions."""
        if self._closed:
            return
        self._closed = True

        runners = [task.runner for task in self._active.values() if task.runner is not None]
        for task_id in list(self._queued) + list(self._active):
            self.cancel_task(task_id)
        self._pending.clear()

        # Wait for running jobs to unwind
        await asyncio.gather(*runners, return_exceptions=True)

    async def __aenter__(self) -> DigestPool:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _dispatch(self) -> None:
        limit = self._settings.concurrency_limit
        while self._pending and len(self._active) < limit:
            _, _, task_id = heapq.heappop(self._pending)
            task = self._queued.pop(task_id, None)
            if task is None:
                continue  # cancelled while pending

            self._active[task_id] = task
            task.runner = asyncio.create_task(self._run(task), name=f"digest-pool-{task_id}")
            task.runner.add_done_callback(lambda _, t=task: self._finish(t))

    async def _run(self, task: PoolTask) -> None:
        if task.future.done():
            return
        try:
            result = await self._hasher.execute(task.data, on_progress=task.on_progress)
        except Exception as e:
            log_pool_error(task_id=task.task_id, error_type=type(e).__name__, error_message=str(e))
            if not task.future.done():
                task.future.set_exception(e)
            return

        if not task.future.done():
            task.future.set_result(format_digest(result.digest, task.length))
        log_pool_event(
            enabled=self.log_enabled,
            event="pool_task_completed",
            task_id=task.task_id,
            priority=task.priority,
            latency_ms=(perf_counter() - task.submitted_at) * 1000.0,
        )

    def _finish(self, task: PoolTask) -> None:
        self._active.pop(task.task_id, None)
        if not self._closed:
            self._dispatch()
