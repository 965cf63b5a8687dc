import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import settings

logger = logging.getLogger(__name__)


class Database:
    client: Optional[AsyncIOMotorClient] = None


db = Database()


async def get_database() -> AsyncIOMotorDatabase:
    return db.client[settings.DATABASE_NAME]


async def connect_to_mongo():
    db.client = AsyncIOMotorClient(settings.MONGODB_URL, tz_aware=True)
    logger.info(f"Connected to MongoDB database '{settings.DATABASE_NAME}'")


async def close_mongo_connection():
    if db.client is not None:
        db.client.close()
        db.client = None
        logger.info("Closed MongoDB connection")
