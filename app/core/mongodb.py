import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from app.core.config import settings

logger = logging.getLogger(__name__)

USERS = "user"
PROFILES = "profiles"
CHAT_SESSIONS = "chat_session"
MESSAGES = "messages"

_client: Optional[AsyncIOMotorClient] = None


def get_database() -> AsyncIOMotorDatabase:
    """Returns the app database, opening the shared client on first use."""
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(
            settings.MONGO_DIRECT_URI or settings.MONGO_URI, uuidRepresentation="standard"
        )
    return _client[settings.MONGO_DB_NAME]


async def init_mongo_client() -> None:
    db = get_database()
    await db[USERS].create_index("phone", unique=True)
    await db[CHAT_SESSIONS].create_index([("user_id", ASCENDING), ("ts", DESCENDING)])
    await db[MESSAGES].create_index([("chat_id", ASCENDING), ("ts", ASCENDING)])
    logger.info("MongoDB ready (database %s)", settings.MONGO_DB_NAME)


async def close_mongo_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_user_collection() -> AsyncIOMotorCollection:
    return get_database()[USERS]


def get_profile_collection() -> AsyncIOMotorCollection:
    return get_database()[PROFILES]


def get_chat_session_collection() -> AsyncIOMotorCollection:
    return get_database()[CHAT_SESSIONS]


def get_message_collection() -> AsyncIOMotorCollection:
    return get_database()[MESSAGES]
