"""Article repository for CRUD operations on Articles collection."""
from motor.motor_asyncio import AsyncIOMotorDatabase
from api.models.article import ArticleModel, NewArticle
from shared.utils import generate_article_id, get_utc_now


class ArticleRepository:
    """Repository for Article CRUD operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.articles

    async def create_article(self, new_article: NewArticle) -> ArticleModel:
        """Create a new article record."""
        article = {
            "_id": generate_article_id(),
            **new_article.model_dump(),
            "created_at": get_utc_now(),
        }
        await self.collection.insert_one(article)
        return ArticleModel(**article)

    async def count_for_subject(self, subject_id: str) -> int:
        """Count the articles filed under a subject."""
        return await self.collection.count_documents({"subject_id": subject_id})
