"""Response schemas for API endpoints."""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from api.models.job import JobStatus


class JobStatusResponse(BaseModel):
    """Response schema for job status."""
    job_id: str = Field(..., description="Job run identifier")
    status: str = Field(..., description="queued, running, completed or failed")
    progress: int = Field(..., description="Progress checkpoint (0-100)")
    message: Optional[str] = Field(None, description="Current stage or error message")
    started_at: Optional[datetime] = Field(None, description="Run start timestamp")
    completed_at: Optional[datetime] = Field(None, description="Run end timestamp")

    @classmethod
    def from_status(cls, status: JobStatus) -> "JobStatusResponse":
        return cls(
            job_id=status.id,
            status=status.state.value,
            progress=status.progress,
            message=status.message,
            started_at=status.started_at,
            completed_at=status.completed_at
        )


class JobQueuedResponse(BaseModel):
    """Response schema for job submission."""
    job_id: str = Field(..., description="Run identifier the job will report under")
    status: str = Field(..., description="Always 'queued'")
    pending: int = Field(..., description="Jobs waiting, including this one")
    message: str = Field(default="Job queued for processing")


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
