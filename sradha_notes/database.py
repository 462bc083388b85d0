"""
MongoDB client configuration for Sradha's Notes
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from . import config

logger = logging.getLogger(__name__)


class MongoClient:
    _instance: Optional[AsyncIOMotorClient] = None

    @classmethod
    def get_client(cls) -> AsyncIOMotorClient:
        """Get Motor client instance (singleton pattern)"""
        if cls._instance is None:
            if not config.MONGO_URL:
                raise ValueError("MONGO_URL must be set")
            cls._instance = AsyncIOMotorClient(config.MONGO_URL)
            logger.info(f"💕 MongoDB client created for database '{config.DB_NAME}'")
        return cls._instance

    @classmethod
    def close(cls) -> None:
        if cls._instance is not None:
            cls._instance.close()
            cls._instance = None


def get_database() -> AsyncIOMotorDatabase:
    """Get the application database"""
    return MongoClient.get_client()[config.DB_NAME]


async def get_db() -> AsyncIOMotorDatabase:
    """FastAPI dependency yielding the database; overridden in tests."""
    return get_database()
