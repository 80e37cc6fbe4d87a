# Schemas module
from .requests import ProcessJobRequest
from .responses import ErrorResponse, JobQueuedResponse, JobStatusResponse

__all__ = [
    "ProcessJobRequest",
    "ErrorResponse",
    "JobQueuedResponse",
    "JobStatusResponse"
]
