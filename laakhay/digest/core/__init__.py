"""Core components."""

from .algorithms import (
    DEFAULT_ALGORITHM,
    HasherFactory,
    HasherState,
    digest_hex_length,
    resolve_hasher_factory,
    validate_algorithm,
)
from .exceptions import (
    DigestError,
    PoolClosedError,
    PoolError,
    RegistryCorruptionError,
    TaskCancelledError,
    TaskTimeoutError,
    UnsupportedAlgorithmError,
)
from .formatting import format_digest

__all__ = [
    "DEFAULT_ALGORITHM",
    "HasherFactory",
    "HasherState",
    "digest_hex_length",
    "resolve_hasher_factory",
    "validate_algorithm",
    "format_digest",
    "DigestError",
    "UnsupportedAlgorithmError",
    "RegistryCorruptionError",
    "PoolError",
    "TaskCancelledError",
    "TaskTimeoutError",
    "PoolClosedError",
]
