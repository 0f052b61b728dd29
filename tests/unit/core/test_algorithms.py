"""Unit tests for digest primitive resolution."""

from __future__ import annotations

import hashlib

import pytest

from laakhay.digest.core import (
    UnsupportedAlgorithmError,
    digest_hex_length,
    resolve_hasher_factory,
    validate_algorithm,
)


class TestResolveHasherFactory:
    """Test algorithm name and factory resolution."""

    def test_default_is_md5(self):
        """Default factory produces MD5 states."""
        state = resolve_hasher_factory()()
        state.update(b"abc")
        assert state.digest() == hashlib.md5(b"abc").digest()

    def test_name_is_case_insensitive(self):
        """Algorithm names are normalized."""
        state = resolve_hasher_factory(" SHA256 ")()
        state.update(b"abc")
        assert state.digest() == hashlib.sha256(b"abc").digest()

    def test_custom_factory_passes_through(self):
        """Callables are used as-is."""
        factory = hashlib.sha1
        assert resolve_hasher_factory(factory) is factory

    def test_unknown_algorithm_rejected(self):
        """Unknown algorithm names raise UnsupportedAlgorithmError."""
        with pytest.raises(UnsupportedAlgorithmError, match="not available"):
            resolve_hasher_factory("not-a-hash")

    def test_variable_length_algorithm_rejected(self):
        """SHAKE algorithms have no fixed digest length."""
        with pytest.raises(UnsupportedAlgorithmError, match="variable-length"):
            validate_algorithm("shake_128")


class TestDigestHexLength:
    """Test full hex length reporting."""

    def test_md5_and_sha256(self):
        """Hex length is twice the digest size."""
        assert digest_hex_length(hashlib.md5) == 32
        assert digest_hex_length(hashlib.sha256) == 64

    def test_custom_state_without_digest_size(self):
        """Falls back to measuring an empty digest."""

        class FixedState:
            def update(self, data):
                pass

            def digest(self):
                return b"\x00" * 4

        assert digest_hex_length(FixedState) == 8
