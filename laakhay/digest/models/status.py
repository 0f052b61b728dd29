"""Pool status snapshot model."""

from pydantic import BaseModel, ConfigDict, Field


class PoolStatus(BaseModel):
    """Point-in-time view of a DigestPool."""

    pool_size: int = Field(..., ge=1)
    max_concurrent_tasks: int = Field(..., ge=1)
    active_tasks: int = Field(..., ge=0)
    pending_tasks: int = Field(..., ge=0)
    closed: bool = False

    @property
    def available_slots(self) -> int:
        """Number of jobs that could start immediately."""
        return max(0, self.max_concurrent_tasks - self.active_tasks)

    model_config = ConfigDict(frozen=True)
