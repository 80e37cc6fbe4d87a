"""Job model definitions."""
from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class JobStateEnum(str, Enum):
    """Job state enumeration."""
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ProcessingJob(BaseModel):
    """A request to process one newspaper document end to end."""
    newspaper_id: str
    name: str
    date: str
    file_path: str
    mime_type: str = "application/pdf"

    class Config:
        frozen = True


class JobStatus(BaseModel):
    """
    Snapshot of a job run.

    Instances are immutable; progress is reported by swapping in a copy
    made with `advance`, `complete` or `fail`.
    """
    id: str
    state: JobStateEnum
    progress: int = Field(default=0, ge=0, le=100)
    message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        frozen = True

    def advance(self, progress: int, message: str) -> "JobStatus":
        """Return a running copy moved forward to the given checkpoint."""
        return self.model_copy(update={
            "state": JobStateEnum.RUNNING,
            "progress": max(self.progress, progress),
            "message": message,
        })

    def complete(self, completed_at: datetime, message: Optional[str] = None) -> "JobStatus":
        """Return a completed copy."""
        return self.model_copy(update={
            "state": JobStateEnum.COMPLETED,
            "progress": 100,
            "message": message,
            "completed_at": completed_at,
        })

    def fail(self, completed_at: datetime, message: str) -> "JobStatus":
        """Return a failed copy; progress stays where the run stopped."""
        return self.model_copy(update={
            "state": JobStateEnum.FAILED,
            "message": message,
            "completed_at": completed_at,
        })
