"""Storage backends used by the processing pipeline."""
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from api.models.article import ArticleModel, NewArticle, Subject
from database.repositories.article_repo import ArticleRepository
from database.repositories.subject_repo import DEFAULT_SUBJECTS, SubjectRepository
from shared.utils import generate_article_id, generate_subject_id, get_utc_now, slugify


class MongoStorage:
    """Storage backend over the MongoDB repositories."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.subject_repo = SubjectRepository(db)
        self.article_repo = ArticleRepository(db)

    async def list_subjects(self) -> List[Subject]:
        return await self.subject_repo.list_subjects()

    async def create_article(self, article: NewArticle) -> ArticleModel:
        return await self.article_repo.create_article(article)

    async def update_subject_article_count(self, subject_id: str, count: int) -> None:
        await self.subject_repo.update_article_count(subject_id, count)

    async def count_articles_for_subject(self, subject_id: str) -> int:
        return await self.article_repo.count_for_subject(subject_id)


class MemoryStorage:
    """
    In-process storage backend.

    Seeded with the default subjects unless `seed=False`. Data lives only
    as long as the process.
    """

    def __init__(self, seed: bool = True):
        self.subjects: Dict[str, Subject] = {}
        self.articles: Dict[str, ArticleModel] = {}
        if seed:
            for subject in DEFAULT_SUBJECTS:
                self.add_subject(subject["name"], subject["description"])

    def add_subject(self, name: str, description: Optional[str] = None) -> Subject:
        """Register a subject and return it."""
        subject = Subject(
            id=generate_subject_id(),
            name=name,
            slug=slugify(name),
            description=description,
        )
        self.subjects[subject.id] = subject
        return subject

    async def list_subjects(self) -> List[Subject]:
        return list(self.subjects.values())

    async def create_article(self, article: NewArticle) -> ArticleModel:
        stored = ArticleModel(
            id=generate_article_id(),
            created_at=get_utc_now(),
            **article.model_dump()
        )
        self.articles[stored.id] = stored
        return stored

    async def update_subject_article_count(self, subject_id: str, count: int) -> None:
        subject = self.subjects.get(subject_id)
        if subject:
            subject.article_count = count

    async def count_articles_for_subject(self, subject_id: str) -> int:
        return sum(1 for a in self.articles.values() if a.subject_id == subject_id)
