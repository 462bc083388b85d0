"""
Create the MongoDB indexes Sradha's Notes sorts and filters on
"""
import asyncio
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from .database import MongoClient, get_database
from .store import INDEXES

logger = logging.getLogger(__name__)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> int:
    """Create every index; existing ones are left alone by MongoDB"""
    for collection, keys in INDEXES:
        name = await db[collection].create_index(keys)
        logger.info(f"📇 Index ready: {collection}.{name}")
    return len(INDEXES)


async def apply_migration():
    """Apply the index migration to the configured database"""
    print("🚀 Creating indexes...")
    try:
        count = await ensure_indexes(get_database())
        print(f"✅ {count} indexes ready!")
    finally:
        MongoClient.close()


def main():
    logging.basicConfig(level=logging.INFO)
    asyncio.run(apply_migration())


if __name__ == "__main__":
    main()
