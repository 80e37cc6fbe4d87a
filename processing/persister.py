"""Persisting subject briefs as article records."""
import logging
from typing import List, Optional

from api.models.article import ArticleModel, NewArticle, Subject, SubjectBrief
from api.models.job import ProcessingJob
from processing.interfaces import StorageBackend
from processing.renderer import RenderedArtifact
from shared.config import settings
from shared.errors import PersistenceError
from shared.utils import estimate_read_time

logger = logging.getLogger(__name__)


class UnmatchedSubjectPolicy:
    """What to do with a brief whose subject name is not a known subject."""
    DEFAULT = "default"  # file it under the first known subject
    SKIP = "skip"


class RecordPersister:
    """Maps briefs onto article records and keeps subject counts in step."""

    def __init__(
        self,
        storage: StorageBackend,
        unmatched_policy: Optional[str] = None,
        read_time_wpm: Optional[int] = None
    ):
        self.storage = storage
        self.unmatched_policy = unmatched_policy or settings.unmatched_subject_policy
        self.read_time_wpm = read_time_wpm or settings.read_time_wpm
        if self.unmatched_policy not in (UnmatchedSubjectPolicy.DEFAULT, UnmatchedSubjectPolicy.SKIP):
            raise ValueError(f"Unknown unmatched subject policy: {self.unmatched_policy}")

    def resolve_subject(self, name: str, subjects: List[Subject]) -> Optional[Subject]:
        """
        Case-insensitive exact match on subject name.

        Under the "default" policy an unknown name falls back to the first
        subject in the list. That mirrors the behavior of the system this
        pipeline replaced and has no business rule behind it; use "skip" to
        drop such briefs instead.
        """
        wanted = name.strip().lower()
        for subject in subjects:
            if subject.name.lower() == wanted:
                return subject

        if self.unmatched_policy == UnmatchedSubjectPolicy.SKIP:
            logger.warning(f"Skipping brief for unknown subject '{name}'")
            return None

        logger.warning(f"Unknown subject '{name}', filing under '{subjects[0].name}'")
        return subjects[0]

    async def persist(
        self,
        job: ProcessingJob,
        brief: SubjectBrief,
        artifact: RenderedArtifact
    ) -> Optional[ArticleModel]:
        """Create the article for one brief; returns None if the brief was skipped."""
        try:
            subjects = await self.storage.list_subjects()
            if not subjects:
                raise PersistenceError("No subjects configured")

            subject = self.resolve_subject(brief.subject, subjects)
            if subject is None:
                return None

            article = await self.storage.create_article(NewArticle(
                newspaper_id=job.newspaper_id,
                subject_id=subject.id,
                title=f"{brief.subject} Summary ({job.date})",
                content=brief.body,
                summary=brief.body,
                date=job.date,
                pdf_path=artifact.relative_path,
                page_count=artifact.page_count,
                read_time=estimate_read_time(brief.body, self.read_time_wpm),
            ))

            count = await self.storage.count_articles_for_subject(subject.id)
            await self.storage.update_subject_article_count(subject.id, count)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to save article for {brief.subject}: {e}") from e

        logger.info(f"Saved article {article.id} under {subject.name} ({count} total)")
        return article
