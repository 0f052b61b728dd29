"""High-level API."""

from .engine import DigestEngine

__all__ = ["DigestEngine"]
