"""Plain-text extraction from uploaded newspaper documents."""
import asyncio
import io
import logging
from pathlib import Path
from typing import Optional

import pdfplumber

from api.models.job import ProcessingJob
from processing.interfaces import FileStorage
from shared.config import settings
from shared.errors import ExtractionError

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPE = "text/plain"


class TextExtractor:
    """Turns a stored document into plain text."""

    def __init__(self, files: FileStorage, upload_dir: Optional[str] = None):
        self.files = files
        self.upload_dir = Path(upload_dir or settings.upload_dir)

    def resolve_source(self, file_path: str) -> Path:
        """Map a stored file path onto the upload directory."""
        return self.upload_dir / Path(file_path).name

    async def extract(self, job: ProcessingJob) -> str:
        """
        Extract the text of the job's source document.

        A PDF without an embedded text layer yields an empty string.
        Raises ExtractionError for unreadable, corrupt or unsupported files.
        """
        mime_type = job.mime_type.split(";")[0].strip().lower()
        if mime_type not in (PDF_MIME_TYPE, TEXT_MIME_TYPE):
            raise ExtractionError(f"Unsupported document type: {job.mime_type}")

        source = self.resolve_source(job.file_path)
        try:
            data = await self.files.read_file(str(source))
        except OSError as e:
            raise ExtractionError(f"Could not read {source.name}: {e}") from e

        if mime_type == TEXT_MIME_TYPE:
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ExtractionError(f"{source.name} is not valid UTF-8 text") from e

        text = await asyncio.to_thread(self._extract_pdf_text, data, source.name)
        if not text.strip():
            logger.warning(f"No text layer found in {source.name}")
        return text

    def _extract_pdf_text(self, data: bytes, name: str) -> str:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            raise ExtractionError(f"Could not parse PDF {name}: {e}") from e
        return "\n".join(pages)
