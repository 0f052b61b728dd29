"""Unit tests for configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from laakhay.digest.models import DEFAULT_TASK_COUNT, EngineSettings, PoolSettings, PoolStatus


class TestEngineSettings:
    """Test EngineSettings validation."""

    def test_defaults(self):
        """Defaults: 4 tasks, md5, full length, logging off."""
        settings = EngineSettings()
        assert settings.task_count == DEFAULT_TASK_COUNT == 4
        assert settings.algorithm == "md5"
        assert settings.digest_length is None
        assert settings.log_enabled is False

    def test_zero_task_count_uses_default(self):
        """A zero task count is corrected, not rejected."""
        assert EngineSettings(task_count=0).task_count == 4

    def test_negative_task_count_rejected(self):
        """Negative task counts are invalid."""
        with pytest.raises(ValidationError):
            EngineSettings(task_count=-1)

    def test_algorithm_normalized(self):
        """Algorithm names are stripped and lowercased."""
        assert EngineSettings(algorithm=" SHA256").algorithm == "sha256"

    def test_unknown_algorithm_rejected(self):
        """Unknown algorithms fail validation."""
        with pytest.raises(ValidationError):
            EngineSettings(algorithm="not-a-hash")

    def test_frozen(self):
        """Settings are immutable."""
        settings = EngineSettings()
        with pytest.raises(ValidationError):
            settings.task_count = 8


class TestPoolSettings:
    """Test PoolSettings defaults and derived values."""

    def test_concurrency_defaults_to_pool_size(self):
        """Without an explicit cap, concurrency equals the pool size."""
        assert PoolSettings(pool_size=3).concurrency_limit == 3

    def test_concurrency_never_exceeds_pool_size(self):
        """The cap is bounded by the pool size."""
        assert PoolSettings(pool_size=2, max_concurrent_tasks=5).concurrency_limit == 2
        assert PoolSettings(pool_size=4, max_concurrent_tasks=1).concurrency_limit == 1

    def test_invalid_pool_size(self):
        """Pool size must be positive."""
        with pytest.raises(ValidationError):
            PoolSettings(pool_size=0)


def test_pool_status_available_slots():
    """Available slots never go negative."""
    status = PoolStatus(pool_size=4, max_concurrent_tasks=2, active_tasks=1, pending_tasks=0)
    assert status.available_slots == 1
    assert status.closed is False
