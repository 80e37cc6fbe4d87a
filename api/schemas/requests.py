"""Request schemas for API endpoints."""
from pydantic import BaseModel, Field, field_validator

from shared.utils import validate_iso_date


class ProcessJobRequest(BaseModel):
    """Request schema for queueing a newspaper for processing."""
    newspaper_id: str = Field(..., min_length=1, description="ID of the uploaded newspaper")
    name: str = Field(..., min_length=1, description="Newspaper display name")
    date: str = Field(..., description="Edition date (YYYY-MM-DD)")
    file_path: str = Field(..., min_length=1, description="Stored file name of the upload")
    mime_type: str = Field(default="application/pdf", description="MIME type of the upload")

    @field_validator('date')
    @classmethod
    def validate_date(cls, v: str) -> str:
        """Validate ISO calendar date format."""
        return validate_iso_date(v)
