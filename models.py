"""
Models - Response objects served to the dashboard frontend.
"""
from datetime import datetime, timedelta
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_RATE_LIMIT = 5000

JobStatus = Literal["success", "failed", "running", "pending"]


class Job(BaseModel):
    """A single normalized workflow run."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Display id derived from the run id, e.g. JOB-000042")
    name: str = Field(description="Workflow name plus run number when known")
    status: JobStatus
    pipeline: str = Field(description="Repository the run belongs to")
    branch: str
    duration: str
    started: str
    organization: str
    run_id: int
    html_url: str
    created_at: datetime = Field(description="Used for ordering only")


class DashboardStats(BaseModel):
    """Job counts by status."""
    success: int = 0
    failed: int = 0
    running: int = 0
    pending: int = 0
    total: int = 0


class RateLimitInfo(BaseModel):
    """Rate-limit snapshot reported by the GitHub API."""
    model_config = ConfigDict(frozen=True)

    remaining: int
    limit: int
    reset_at: datetime

    @classmethod
    def default(cls, now: datetime) -> "RateLimitInfo":
        """Placeholder used when no API call reported a snapshot."""
        return cls(
            remaining=DEFAULT_RATE_LIMIT,
            limit=DEFAULT_RATE_LIMIT,
            reset_at=now + timedelta(hours=1),
        )


class DashboardResponse(BaseModel):
    """Payload of GET /api/dashboard."""
    stats: DashboardStats
    jobs: list[Job]
    rate_limit: RateLimitInfo
