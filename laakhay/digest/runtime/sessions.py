"""Session registry for incremental hashing.

A SessionRegistry maps caller-chosen session ids to running hasher states so
that one digest can be accumulated across many independent calls.

Architecture:
    - One registry instance owns one table and one lock; there is no global
      registry, so independent engines (and tests) never share sessions.
    - The lock covers a single table operation and is released before control
      returns to the caller. No operation awaits while holding it.
    - Finalization removes the entry under the lock, then computes the digest
      outside of it.

Failure Model:
    Unknown ids are reported with sentinels (False / ""), never exceptions.
    If an exception escapes while the lock is held, the registry is marked
    corrupted and every later call raises RegistryCorruptionError.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from ..core.algorithms import DEFAULT_ALGORITHM, HasherFactory, HasherState, resolve_hasher_factory
from ..core.exceptions import RegistryCorruptionError
from ..core.formatting import format_digest
from .telemetry import log_registry_corrupted, log_session_event


class SessionRegistry:
    """Table of active incremental hashing sessions."""

    def __init__(
        self,
        algorithm: str | HasherFactory = DEFAULT_ALGORITHM,
        *,
        log_enabled: bool = False,
    ) -> None:
        """Initialize the registry.

        Args:
            algorithm: Digest algorithm name or hasher factory for new sessions
            log_enabled: Emit diagnostic telemetry
        """
        self._factory = resolve_hasher_factory(algorithm)
        self._sessions: dict[str, HasherState] = {}
        self._lock = threading.Lock()
        self._corrupted = False
        self.log_enabled = log_enabled

    @contextmanager
    def _table(self, session_id: str | None = None) -> Iterator[dict[str, HasherState]]:
        with self._lock:
            if self._corrupted:
                raise RegistryCorruptionError(
                    "Session registry is corrupted by an earlier failure", session_id=session_id
                )
            try:
                yield self._sessions
            except Exception as e:
                self._corrupted = True
                log_registry_corrupted(
                    session_id=session_id,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise RegistryCorruptionError(
                    f"Session table operation failed: {e}", session_id=session_id
                ) from e

    @property
    def corrupted(self) -> bool:
        return self._corrupted

    def start(self, session_id: str) -> None:
        """Start a session, replacing any active session with the same id.

        Args:
            session_id: Caller-chosen session identifier
        """
        state = self._factory()
        with self._table(session_id) as table:
            replaced = session_id in table
            table[session_id] = state
        log_session_event(
            enabled=self.log_enabled,
            event="session_started",
            session_id=session_id,
            found=replaced,
        )

    def update(self, session_id: str, data: bytes | bytearray | memoryview) -> bool:
        """Absorb ``data`` into a session.

        Args:
            session_id: Session identifier
            data: Bytes to append

        Returns:
            True if the session exists, False otherwise (no side effect)
        """
        view = memoryview(data)
        with self._table(session_id) as table:
            state = table.get(session_id)
            if state is not None:
                state.update(view)
        log_session_event(
            enabled=self.log_enabled,
            event="session_updated",
            session_id=session_id,
            nbytes=len(view),
            found=state is not None,
        )
        return state is not None

    def finalize(self, session_id: str, length: int | None = None) -> str:
        """Finalize a session and remove it from the table.

        Args:
            session_id: Session identifier
            length: Number of hex characters to keep (None = full digest)

        Returns:
            Formatted digest, or an empty string if the session does not exist
        """
        with self._table(session_id) as table:
            state = table.pop(session_id, None)
        if state is None:
            log_session_event(
                enabled=self.log_enabled,
                event="session_finalized",
                session_id=session_id,
                found=False,
            )
            return ""

        result = format_digest(state.digest(), length)
        log_session_event(enabled=self.log_enabled, event="session_finalized", session_id=session_id)
        return result

    def cancel(self, session_id: str) -> bool:
        """Drop a session without hashing.

        Returns:
            True if the session existed
        """
        with self._table(session_id) as table:
            found = table.pop(session_id, None) is not None
        log_session_event(
            enabled=self.log_enabled,
            event="session_cancelled",
            session_id=session_id,
            found=found,
        )
        return found

    def __contains__(self, session_id: object) -> bool:
        with self._table() as table:
            return session_id in table

    def __len__(self) -> int:
        with self._table() as table:
            return len(table)
