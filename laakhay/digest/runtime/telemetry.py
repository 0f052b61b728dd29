"""Structured logging for sessions and the task pool."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_session_event(
    *,
    enabled: bool,
    event: str,
    session_id: str,
    nbytes: int | None = None,
    found: bool = True,
) -> None:
    """Log a session lifecycle event.

    Args:
        enabled: Whether diagnostic logging is on
        event: Event name (e.g., "session_started", "session_finalized")
        session_id: Session identifier
        nbytes: Bytes absorbed by an update (optional)
        found: Whether the session existed
    """
    if not enabled:
        return
    logger.info(
        event,
        extra={
            "session_id": session_id,
            "nbytes": nbytes,
            "found": found,
        },
    )


def log_registry_corrupted(*, session_id: str | None, error_type: str, error_message: str) -> None:
    """Log the failure that poisoned a session registry. Always emitted."""
    logger.error(
        "session_registry_corrupted",
        extra={
            "session_id": session_id,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_pool_event(
    *,
    enabled: bool,
    event: str,
    task_id: str,
    priority: int | None = None,
    latency_ms: float | None = None,
) -> None:
    """Log a pool task lifecycle event."""
    if not enabled:
        return
    logger.info(
        event,
        extra={
            "task_id": task_id,
            "priority": priority,
            "latency_ms": latency_ms,
        },
    )


def log_pool_error(*, task_id: str, error_type: str, error_message: str) -> None:
    """Log a pool task failure."""
    logger.error(
        "pool_task_failed",
        extra={
            "task_id": task_id,
            "error_type": error_type,
            "error_message": error_message,
        },
    )
