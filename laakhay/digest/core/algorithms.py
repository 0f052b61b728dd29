"""Pluggable digest primitives.

Every component hashes through a zero-argument factory that returns a fresh
hasher state. Any ``hashlib`` algorithm with a fixed digest size works, as does
any custom object exposing ``update(bytes)`` and ``digest() -> bytes``.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from typing import Protocol

from .exceptions import UnsupportedAlgorithmError

DEFAULT_ALGORITHM = "md5"


class HasherState(Protocol):
    """Running hash accumulator."""

    def update(self, data: bytes | bytearray | memoryview, /) -> None: ...

    def digest(self) -> bytes: ...


HasherFactory = Callable[[], HasherState]


def validate_algorithm(name: str) -> str:
    """Normalize and validate a ``hashlib`` algorithm name.

    Args:
        name: Algorithm name (case-insensitive, e.g. "md5", "SHA256")

    Returns:
        Lowercase algorithm name

    Raises:
        UnsupportedAlgorithmError: If the algorithm is unknown or has a variable-length output
    """
    normalized = name.strip().lower()
    if normalized.startswith("shake_"):
        raise UnsupportedAlgorithmError(
            f"Algorithm '{name}' has a variable-length digest", algorithm=name
        )
    available = {algo.lower() for algo in hashlib.algorithms_available}
    if normalized not in available:
        raise UnsupportedAlgorithmError(f"Algorithm '{name}' is not available", algorithm=name)
    return normalized


def resolve_hasher_factory(algorithm: str | HasherFactory = DEFAULT_ALGORITHM) -> HasherFactory:
    """Resolve an algorithm name or factory into a hasher factory.

    Args:
        algorithm: ``hashlib`` algorithm name or a zero-argument factory

    Returns:
        Callable producing fresh hasher states
    """
    if callable(algorithm):
        return algorithm

    name = validate_algorithm(algorithm)
    constructor = getattr(hashlib, name, None)
    if constructor is not None:
        return constructor

    def factory() -> HasherState:
        return hashlib.new(name)

    return factory


def digest_hex_length(factory: HasherFactory) -> int:
    """Return the length of a full hex digest produced by ``factory``."""
    state = factory()
    size = getattr(state, "digest_size", None)
    if size is None:
        size = len(state.digest())
    return size * 2
