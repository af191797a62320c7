# database.py
import logging
from motor.motor_asyncio import AsyncIOMotorClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


async def connect(settings):
    """Open the configured MongoDB, or an in-memory stand-in when none is reachable."""
    if settings.mongodb_uri:
        client = AsyncIOMotorClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
        try:
            await client.admin.command("ping")
            logger.info("MongoDB connection successful")
            return client, client[settings.db_name], True
        except PyMongoError as e:
            client.close()
            logger.error(f"MongoDB connection failed: {e}")
            logger.warning("Service keeps running, data will not be persisted")
    else:
        logger.warning("No MONGODB_URI configured, using in-memory store (not persisted)")

    client = AsyncMongoMockClient()
    return client, client[settings.db_name], False


async def init_db(db):
    await db.solutions.create_index("id", unique=True)
    await db.solutions.create_index("createdAt")
    await db.solutions.create_index("expiresAt")
    await db.students.create_index("id", unique=True)
    await db.students.create_index("lineUserId", unique=True)
    await db.teachers.create_index("id", unique=True)
    await db.teachers.create_index("lineUserId", unique=True)
    await db.topics.create_index("id", unique=True)
