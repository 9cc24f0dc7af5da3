# backend/citizen_feedback/db/mongo.py
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from citizen_feedback.core.config import settings

logger = logging.getLogger(__name__)

client: AsyncIOMotorClient | None = None
db = None


async def connect_to_mongo():
    global client, db
    # tz_aware: createdAt comes back as an aware UTC datetime
    client = AsyncIOMotorClient(settings.MONGO_URI, tz_aware=True)
    db = client[settings.MONGO_DB_NAME]
    await ensure_indexes(db)
    logger.info("MongoDB connected (db=%s)", settings.MONGO_DB_NAME)


async def ensure_indexes(database: AsyncIOMotorDatabase):
    await database["admins"].create_index([("email", ASCENDING)], unique=True)
    await database["feedbacks"].create_index([("createdAt", DESCENDING)])


async def close_mongo_connection():
    global client, db
    if client:
        client.close()
        client = None
        db = None
        logger.info("MongoDB connection closed")


def get_db():
    """
    Current database handle. Raises if connect_to_mongo() has not run yet.
    """
    if db is None:
        raise RuntimeError("Database is not connected")
    return db
