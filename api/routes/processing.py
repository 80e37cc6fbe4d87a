"""Processing routes for the REST API."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.models.job import ProcessingJob
from api.schemas.requests import ProcessJobRequest
from api.schemas.responses import JobQueuedResponse, JobStatusResponse
from processing.queue import ProcessingQueue


router = APIRouter(prefix="/processing", tags=["processing"])


def get_queue(request: Request) -> ProcessingQueue:
    """Dependency for the queue owned by the application."""
    queue = getattr(request.app.state, "processing_queue", None)
    if queue is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Processing queue is not running"
        )
    return queue


@router.post("/jobs", response_model=JobQueuedResponse, status_code=status.HTTP_202_ACCEPTED)
async def queue_job(
    request: ProcessJobRequest,
    queue: ProcessingQueue = Depends(get_queue)
):
    """
    Queue a newspaper for processing.

    Returns immediately; poll /processing/status for progress.
    """
    queued = queue.enqueue(ProcessingJob(**request.model_dump()))

    return JobQueuedResponse(
        job_id=queued.id,
        status=queued.state.value,
        pending=queue.pending_count
    )


@router.get("/status", response_model=Optional[JobStatusResponse])
async def get_latest_status(queue: ProcessingQueue = Depends(get_queue)):
    """Get the status of the most recently started job, or null."""
    latest = queue.get_latest_status()
    if latest is None:
        return None
    return JobStatusResponse.from_status(latest)
