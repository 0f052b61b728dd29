"""Custom exception hierarchy."""

from __future__ import annotations


class DigestError(Exception):
    """Base exception for all library errors."""

    pass


class UnsupportedAlgorithmError(DigestError, ValueError):
    """Digest algorithm is unknown or does not produce a fixed-length digest."""

    def __init__(self, message: str, algorithm: str | None = None) -> None:
        super().__init__(message)
        self.algorithm = algorithm


class RegistryCorruptionError(DigestError):
    """Session table is no longer trustworthy.

    Raised when a previous table operation failed while holding the registry
    lock. Every later operation on the same registry raises this error instead
    of returning a digest computed from possibly inconsistent state.
    """

    def __init__(self, message: str, session_id: str | None = None) -> None:
        super().__init__(message)
        self.session_id = session_id


class PoolError(DigestError):
    """Error raised by the digest task pool."""

    def __init__(self, message: str, task_id: str | None = None) -> None:
        super().__init__(message)
        self.task_id = task_id


class TaskCancelledError(PoolError):
    """Pool task was cancelled before it produced a digest."""

    pass


class TaskTimeoutError(PoolError):
    """Pool task did not finish within its timeout."""

    def __init__(self, message: str, task_id: str | None = None, timeout: float = 0.0) -> None:
        super().__init__(message, task_id=task_id)
        self.timeout = timeout


class PoolClosedError(PoolError):
    """Pool has been closed and accepts no more work."""

    pass
