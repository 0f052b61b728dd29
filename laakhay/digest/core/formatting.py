"""Digest formatting and truncation."""

from __future__ import annotations


def format_digest(raw: bytes, length: int | None = None) -> str:
    """Render a raw digest as lowercase hex, truncated to ``length`` characters.

    Truncation is textual: ``length`` counts hex characters, not bits. A length
    larger than the full hex string returns the full string unchanged.

    Args:
        raw: Raw digest bytes
        length: Number of hex characters to keep (None = full digest)

    Returns:
        Lowercase hex string
    """
    hex_digest = raw.hex()
    if length is None or length == len(hex_digest):
        return hex_digest
    return hex_digest[: max(0, min(length, len(hex_digest)))]
