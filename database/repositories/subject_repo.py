"""Subject repository for CRUD operations on Subjects collection."""
import logging
from typing import Optional, List, Dict
from motor.motor_asyncio import AsyncIOMotorDatabase
from api.models.article import Subject
from shared.utils import generate_subject_id, slugify

logger = logging.getLogger(__name__)


DEFAULT_SUBJECTS: List[Dict[str, str]] = [
    {"name": "Economy", "description": "Economic policies, trade, budget, and financial matters"},
    {"name": "Politics", "description": "Political developments, governance, and policy decisions"},
    {"name": "International Relations", "description": "Foreign policy, diplomacy, and global affairs"},
    {"name": "Environment", "description": "Environmental issues, climate change, and sustainability"},
    {"name": "Science & Technology", "description": "Scientific developments and technological advances"},
    {"name": "Social Issues", "description": "Society, culture, and social welfare matters"},
    {"name": "History", "description": "Historical events and their contemporary relevance"},
    {"name": "Geography", "description": "Physical and human geography topics"},
    {"name": "Current Affairs", "description": "General current affairs and miscellaneous news"},
]


class SubjectRepository:
    """Repository for Subject CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.subjects

    async def create_subject(
        self,
        name: str,
        description: Optional[str] = None
    ) -> Subject:
        """Create a new subject record."""
        subject = {
            "_id": generate_subject_id(),
            "name": name,
            "slug": slugify(name),
            "description": description,
            "article_count": 0
        }
        await self.collection.insert_one(subject)
        return Subject(**subject)

    async def list_subjects(self) -> List[Subject]:
        """List all subjects in insertion order."""
        cursor = self.collection.find({})
        docs = await cursor.to_list(length=None)
        return [Subject(**doc) for doc in docs]

    async def update_article_count(self, subject_id: str, count: int) -> bool:
        """Overwrite the stored article count for a subject."""
        result = await self.collection.update_one(
            {"_id": subject_id},
            {"$set": {"article_count": count}}
        )
        return result.modified_count > 0

    async def seed_defaults(self) -> int:
        """Insert the default subjects if the collection is empty."""
        if await self.collection.count_documents({}) > 0:
            return 0

        for subject in DEFAULT_SUBJECTS:
            await self.create_subject(subject["name"], subject["description"])

        logger.info(f"Seeded {len(DEFAULT_SUBJECTS)} default subjects")
        return len(DEFAULT_SUBJECTS)
