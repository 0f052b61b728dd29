"""Structured logging for chunked and parallel hashing.

Every hook takes an ``enabled`` flag; when it is False nothing is emitted.
"""

from __future__ import annotations

import logging

from .definitions import DigestResult

logger = logging.getLogger(__name__)


def log_digest_plan(
    *,
    enabled: bool,
    mode: str,
    total_bytes: int,
    total_slices: int,
    chunk_size: int | None = None,
) -> None:
    """Log digest plan creation.

    Args:
        enabled: Whether diagnostic logging is on
        mode: "streamed" or "parallel"
        total_bytes: Input length
        total_slices: Number of slices or chunks planned
        chunk_size: Streaming chunk size (None if unchunked or parallel)
    """
    if not enabled:
        return
    logger.info(
        "digest_plan_created",
        extra={
            "mode": mode,
            "total_bytes": total_bytes,
            "total_slices": total_slices,
            "chunk_size": chunk_size,
        },
    )


def log_chunk_progress(*, enabled: bool, processed_bytes: int, total_bytes: int) -> None:
    """Log streaming progress at a suspension point."""
    if not enabled:
        return
    logger.debug(
        "digest_chunk_progress",
        extra={
            "processed_bytes": processed_bytes,
            "total_bytes": total_bytes,
            "percent": round(processed_bytes * 100.0 / total_bytes, 2) if total_bytes else 100.0,
        },
    )


def log_slice_completed(
    *,
    enabled: bool,
    slice_index: int,
    start: int,
    end: int,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single parallel slice.

    Args:
        enabled: Whether diagnostic logging is on
        slice_index: Zero-based index of the slice
        start: Start offset of the processed range
        end: Exclusive end offset of the processed range
        latency_ms: Latency in milliseconds (optional)
    """
    if not enabled:
        return
    logger.info(
        "digest_slice_completed",
        extra={
            "slice_index": slice_index,
            "start": start,
            "end": end,
            "latency_ms": latency_ms,
        },
    )


def log_digest_complete(
    *,
    enabled: bool,
    mode: str,
    result: DigestResult,
    total_latency_ms: float | None = None,
) -> None:
    """Log completion of a digest computation."""
    if not enabled:
        return
    logger.info(
        "digest_completed",
        extra={
            "mode": mode,
            "slices_used": result.slices_used,
            "yields": result.yields,
            "total_bytes": result.total_bytes,
            "digest": result.digest.hex(),
            "total_latency_ms": total_latency_ms,
        },
    )
