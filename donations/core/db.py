"""
Document store connection management.

Provides the lazily created Motor client, database accessor and the index
declarations the repositories rely on:
- a unique "id" index on every entity collection
- a unique "email" index on users
- a text index on post captions (consumed by search routes)
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, TEXT
from pymongo.errors import PyMongoError

from donations.core.config import settings
from donations.core.errors import StoreError
from donations.domain.enums import Collection

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None


def get_client() -> AsyncIOMotorClient:
    """
    Create and configure the Motor client.

    The client owns its own connection pool; it is created once per process
    and reused by every request.

    Returns:
        Configured Motor client
    """
    global _client

    if _client is not None:
        return _client

    _client = AsyncIOMotorClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
        uuidRepresentation="standard",
        appname=settings.app_name,
    )
    logger.info("Created document store client", extra={"database": settings.mongodb_database})
    return _client


def get_database() -> AsyncIOMotorDatabase:
    """Return the configured application database."""
    return get_client()[settings.mongodb_database]


def close_client() -> None:
    """Close the Motor client. Useful for tests and shutdown hooks."""
    global _client

    if _client is not None:
        _client.close()
    _client = None


async def ensure_unique_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Declare the uniqueness constraints the repositories depend on.

    Identifier uniqueness is enforced per collection only.
    """
    try:
        for collection in Collection:
            await db[collection.value].create_index([("id", ASCENDING)], unique=True)
        await db[Collection.USERS.value].create_index([("email", ASCENDING)], unique=True)
    except PyMongoError as e:
        raise StoreError("Failed to create unique indexes", details={"error": str(e)}) from e


async def ensure_text_indexes(db: AsyncIOMotorDatabase) -> None:
    """Declare the caption text index used by post search."""
    try:
        await db[Collection.POSTS.value].create_index([("caption", TEXT)])
    except PyMongoError as e:
        raise StoreError("Failed to create text indexes", details={"error": str(e)}) from e


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Declare every index the core relies on. Safe to call on each startup."""
    await ensure_unique_indexes(db)
    await ensure_text_indexes(db)
    logger.info("Document store indexes ensured")
