"""Collaborator interfaces consumed by the processing pipeline."""
from typing import List, Protocol, Sequence

from api.models.article import ArticleModel, NewArticle, Subject


class StorageBackend(Protocol):
    """Record storage for subjects and articles."""

    async def list_subjects(self) -> List[Subject]: ...

    async def create_article(self, article: NewArticle) -> ArticleModel: ...

    async def update_subject_article_count(self, subject_id: str, count: int) -> None: ...

    async def count_articles_for_subject(self, subject_id: str) -> int: ...


class FileStorage(Protocol):
    """Byte-level access to source documents and rendered artifacts."""

    async def read_file(self, path: str) -> bytes: ...

    async def write_file(self, path: str, data: bytes) -> None: ...

    async def ensure_directory(self, path: str) -> None: ...


class SummarizationCapability(Protocol):
    """Text-in, text-out language model."""

    @property
    def is_configured(self) -> bool: ...

    async def generate(self, prompt_parts: Sequence[str]) -> str: ...
