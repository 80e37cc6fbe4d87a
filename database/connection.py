"""Database connection setup for MongoDB."""
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from shared.config import settings


class DatabaseConnection:
    """Manages the MongoDB connection."""

    _mongo_client: Optional[AsyncIOMotorClient] = None
    _db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def init_mongo(cls) -> AsyncIOMotorDatabase:
        """Initialize MongoDB connection."""
        if cls._mongo_client is None:
            cls._mongo_client = AsyncIOMotorClient(settings.mongo_url)
            cls._db = cls._mongo_client[settings.mongo_db_name]
            await cls._setup_indexes()
        return cls._db

    @classmethod
    async def _setup_indexes(cls):
        """Set up MongoDB indexes for optimal query performance."""
        if cls._db is None:
            return

        # Articles collection indexes
        await cls._db.articles.create_index("subject_id")
        await cls._db.articles.create_index("newspaper_id")
        await cls._db.articles.create_index("date")

        # Subjects collection indexes
        await cls._db.subjects.create_index("slug", unique=True)

    @classmethod
    async def close_connections(cls):
        """Close the database connection."""
        if cls._mongo_client:
            cls._mongo_client.close()
            cls._mongo_client = None
            cls._db = None
