"""Rendering subject briefs to standalone PDF files."""
import asyncio
import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from processing.interfaces import FileStorage
from shared.config import settings
from shared.errors import RenderError
from shared.utils import slugify

logger = logging.getLogger(__name__)

# Core PDF fonts only cover Latin-1
_TRANSLITERATIONS = {
    "\u2018": "'", "\u2019": "'", "\u201c": '"', "\u201d": '"',
    "\u2013": "-", "\u2014": "-", "\u2022": "-", "\u2026": "...",
    "\u00a0": " ", "\u20b9": "Rs.",
}


@dataclass
class RenderedArtifact:
    """Location and size of a rendered brief."""
    path: Path
    relative_path: str
    page_count: int


def to_latin1(text: str) -> str:
    for char, replacement in _TRANSLITERATIONS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", errors="replace").decode("latin-1")


class ArtifactRenderer:
    """Writes a titled brief into `<output_dir>/summaries/<date>/<slug>.pdf`."""

    def __init__(self, files: FileStorage, output_dir: Optional[str] = None):
        self.files = files
        self.output_dir = Path(output_dir or settings.output_dir)

    def artifact_paths(self, subject: str, date: str):
        """Return (absolute directory, file name, path relative to the output root)."""
        slug = slugify(subject) or f"subject-{hashlib.sha1(subject.encode('utf-8')).hexdigest()[:10]}"
        filename = f"{slug}.pdf"
        directory = self.output_dir / "summaries" / date
        return directory, filename, f"summaries/{date}/{filename}"

    async def render(self, subject: str, date: str, body: str) -> RenderedArtifact:
        directory, filename, relative_path = self.artifact_paths(subject, date)
        path = directory / filename
        try:
            await self.files.ensure_directory(str(directory))
            data, page_count = await asyncio.to_thread(
                self.build_pdf, f"{subject} - {date}", body
            )
            await self.files.write_file(str(path), data)
        except Exception as e:
            raise RenderError(f"Failed to render brief for {subject}: {e}") from e

        logger.info(f"Rendered {relative_path} ({page_count} page(s))")
        return RenderedArtifact(path=path, relative_path=relative_path, page_count=page_count)

    def build_pdf(self, title: str, body: str):
        """Lay out the title and body; returns (pdf bytes, page count)."""
        pdf = FPDF()
        pdf.set_margins(18, 18, 18)
        pdf.set_auto_page_break(auto=True, margin=18)
        pdf.add_page()

        pdf.set_font("Helvetica", style="BU", size=16)
        pdf.multi_cell(0, 9, to_latin1(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(5)

        pdf.set_font("Helvetica", size=12)
        pdf.multi_cell(0, 6, to_latin1(body), align="L", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        return bytes(pdf.output()), pdf.page_no()
