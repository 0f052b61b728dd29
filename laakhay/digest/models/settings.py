"""Engine and pool configuration models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.algorithms import DEFAULT_ALGORITHM, validate_algorithm

DEFAULT_TASK_COUNT = 4
MIB = 1024 * 1024


class EngineSettings(BaseModel):
    """Configuration for a DigestEngine.

    A task count of zero is not an error: it is replaced with the default.
    """

    task_count: int = Field(default=DEFAULT_TASK_COUNT, ge=0)
    algorithm: str = DEFAULT_ALGORITHM
    digest_length: int | None = Field(default=None, ge=0)
    log_enabled: bool = False

    @field_validator("task_count")
    @classmethod
    def default_task_count(cls, v: int) -> int:
        """Substitute the default task count for zero."""
        return v or DEFAULT_TASK_COUNT

    @field_validator("algorithm")
    @classmethod
    def check_algorithm(cls, v: str) -> str:
        """Ensure the algorithm is available and fixed-length."""
        return validate_algorithm(v)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class PoolSettings(BaseModel):
    """Configuration for a DigestPool."""

    pool_size: int = Field(default=DEFAULT_TASK_COUNT, ge=1)
    max_concurrent_tasks: int | None = Field(default=None, ge=1)
    large_input_threshold: int = Field(default=8 * MIB, gt=0)
    chunk_size: int = Field(default=8 * MIB, gt=0)
    default_timeout: float | None = Field(default=60.0, gt=0)

    @property
    def concurrency_limit(self) -> int:
        """Maximum number of jobs running at once (never more than the pool size)."""
        return min(self.pool_size, self.max_concurrent_tasks or self.pool_size)

    model_config = ConfigDict(frozen=True)
