"""DigestEngine facade for streamed, parallel and incremental hashing.

Architecture:
    DigestEngine wires the chunking layer and the session registry together
    behind one object:
    - compute_digest_streamed: CooperativeHasher (single running state)
    - compute_digest_parallel: ParallelAggregator (per-slice fan-out/fan-in)
    - *_session: SessionRegistry (caller-named incremental state)
    All results are formatted by format_digest.

Design Decisions:
    - Registry injection: each engine owns its registry unless one is passed in,
      so engines never share sessions implicitly
    - Yield point injection: the host decides what a cooperative suspension is
    - Sentinels instead of exceptions for unknown sessions and empty input

See Also:
    - ChunkPlanner: Slice partitioning
    - DigestPool: Queue of many independent digest jobs
"""

from __future__ import annotations

from concurrent.futures import Executor

from ..core.algorithms import HasherFactory, resolve_hasher_factory
from ..core.formatting import format_digest
from ..models.settings import EngineSettings
from ..runtime.chunking import (
    ChunkPlanner,
    CooperativeHasher,
    DigestResult,
    ParallelAggregator,
    StreamPolicy,
)
from ..runtime.chunking.executors import ProgressCallback
from ..runtime.chunking.telemetry import log_digest_complete
from ..runtime.scheduler import YieldPoint
from ..runtime.sessions import SessionRegistry

BytesLike = bytes | bytearray | memoryview


class DigestEngine:
    """High-level entry point for digest computation.

    Example:
        >>> engine = DigestEngine(task_count=4)
        >>> await engine.compute_digest_streamed(b"abc")
        '900150983cd24fb0d6963f7d28e17f72'
        >>> engine.start_session("upload-1")
        >>> engine.update_session("upload-1", b"ab")
        True
        >>> engine.update_session("upload-1", b"c")
        True
        >>> engine.finalize_session("upload-1", 16)
        '900150983cd24fb0'
    """

    def __init__(
        self,
        task_count: int | None = None,
        *,
        log_enabled: bool | None = None,
        settings: EngineSettings | None = None,
        algorithm: str | HasherFactory | None = None,
        policy: StreamPolicy | None = None,
        registry: SessionRegistry | None = None,
        yield_point: YieldPoint | None = None,
        executor: Executor | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            task_count: Default number of parallel slices (0 = default of 4)
            log_enabled: Emit diagnostic telemetry (default off)
            settings: Base settings; explicit arguments override its fields
            algorithm: Algorithm name or hasher factory (overrides settings.algorithm)
            policy: Streaming chunk/yield policy
            registry: Session registry to use (a new one is created if omitted).
                An injected registry is shared, so its logging flag is left alone
            yield_point: Cooperative suspension callback
            executor: Optional executor for offloading per-slice hashing

        Note:
            A custom hasher factory cannot be expressed in EngineSettings, so it
            is accepted directly through ``algorithm``.
        """
        overrides: dict[str, object] = {}
        if task_count is not None:
            overrides["task_count"] = task_count
        if log_enabled is not None:
            overrides["log_enabled"] = log_enabled
        if isinstance(algorithm, str):
            overrides["algorithm"] = algorithm
        base = settings or EngineSettings()
        self._settings = (
            EngineSettings(**{**base.model_dump(), **overrides}) if overrides else base
        )

        self._factory = (
            algorithm if callable(algorithm) else resolve_hasher_factory(self._settings.algorithm)
        )
        self._planner = ChunkPlanner(policy)
        self._log_enabled = self._settings.log_enabled
        self._streamer = CooperativeHasher(
            self._factory, self._planner, yield_point=yield_point, log_enabled=self._log_enabled
        )
        self._aggregator = ParallelAggregator(
            self._factory,
            self._planner,
            yield_point=yield_point,
            executor=executor,
            log_enabled=self._log_enabled,
        )
        # Architecture: Registry injection; an injected registry keeps its own logging flag
        self._owns_registry = registry is None
        self._registry = registry if registry is not None else SessionRegistry(self._factory)
        if self._owns_registry:
            self._registry.log_enabled = self._log_enabled

    @property
    def task_count(self) -> int:
        """Default number of parallel slices."""
        return self._settings.task_count

    @property
    def settings(self) -> EngineSettings:
        """Effective settings.

        When a hasher factory was passed as ``algorithm``, ``settings.algorithm``
        does not describe it; use ``hasher_factory`` instead.
        """
        return self._settings

    @property
    def hasher_factory(self) -> HasherFactory:
        """Factory producing the hasher states this engine digests with."""
        return self._factory

    @property
    def planner(self) -> ChunkPlanner:
        return self._planner

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    def set_logging(self, enabled: bool) -> None:
        """Turn diagnostic telemetry on or off."""
        self._log_enabled = enabled
        self._streamer.log_enabled = enabled
        self._aggregator.log_enabled = enabled
        if self._owns_registry:
            self._registry.log_enabled = enabled

    def is_logging(self) -> bool:
        return self._log_enabled

    def _resolve_length(self, length: int | None) -> int | None:
        return length if length is not None else self._settings.digest_length

    async def compute_digest_streamed(
        self,
        data: BytesLike,
        length: int | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Single-pass digest of ``data``, suspending periodically.

        The result equals the reference digest of the raw bytes for any chunk
        size or yield frequency.

        Args:
            data: Input bytes
            length: Hex characters to keep (None = settings default, else full)
            on_progress: Optional callback receiving percent complete

        Returns:
            Lowercase hex digest, or "" for empty input
        """
        view = memoryview(data)
        if len(view) == 0:
            return ""
        result = await self._streamer.execute(view, on_progress=on_progress)
        return format_digest(result.digest, self._resolve_length(length))

    async def compute_digest_parallel(
        self,
        data: BytesLike,
        task_count: int | None = None,
        length: int | None = None,
    ) -> str:
        """Composed digest ``hash(digest(slice_0) || ... || digest(slice_k-1))``.

        This is not the single-pass digest of ``data``; the composition is
        applied even when only one slice is used.

        Args:
            data: Input bytes
            task_count: Number of slices (None = engine default, 0 = 4)
            length: Hex characters to keep (None = settings default, else full)

        Returns:
            Lowercase hex digest, or "" for empty input
        """
        view = memoryview(data)
        if len(view) == 0:
            return ""
        count = self.task_count if task_count is None else task_count
        raw = await self._aggregator.digest(view, count)
        return format_digest(raw, self._resolve_length(length))

    async def compute_digest_single(self, data: BytesLike, length: int | None = None) -> str:
        """Single-pass digest of ``data`` in one update, without suspending."""
        view = memoryview(data)
        if len(view) == 0:
            return ""
        state = self._factory()
        state.update(view)
        result = DigestResult(digest=state.digest(), slices_used=1, total_bytes=len(view))
        log_digest_complete(enabled=self._log_enabled, mode="single", result=result)
        return format_digest(result.digest, self._resolve_length(length))

    def start_session(self, session_id: str) -> None:
        """Start (or restart) an incremental session."""
        self._registry.start(session_id)

    def update_session(self, session_id: str, data: BytesLike) -> bool:
        """Append bytes to a session; False if the session is unknown."""
        return self._registry.update(session_id, data)

    def finalize_session(self, session_id: str, length: int | None = None) -> str:
        """Finish a session and return its digest; "" if the session is unknown."""
        return self._registry.finalize(session_id, self._resolve_length(length))

    def cancel_session(self, session_id: str) -> bool:
        """Drop a session without hashing; False if the session is unknown."""
        return self._registry.cancel(session_id)

    def has_session(self, session_id: str) -> bool:
        return session_id in self._registry

    @property
    def active_sessions(self) -> int:
        """Number of sessions started and not yet finalized or cancelled."""
        return len(self._registry)
