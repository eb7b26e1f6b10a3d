"""
Single point of contact with the document store.

Every create, edit and array append in the core is one upsert() call and
every lookup is one find_one() call. Both are single-document operations,
which the store applies atomically; there are no cross-document
transactions.

Driver failures are translated here: a uniqueness violation becomes a
retryable ConflictError, anything else a StoreError. The original driver
exception is chained.
"""

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from donations.core.errors import ConflictError, StoreError

logger = logging.getLogger(__name__)

# The store's own primary key never leaves the gateway
_PROJECTION = {"_id": False}


async def upsert(
    db: AsyncIOMotorDatabase,
    collection: str,
    query: dict[str, Any],
    update: dict[str, Any],
    *,
    create: bool = True,
) -> dict[str, Any] | None:
    """
    Apply update to the single document matching query and return the result.

    Args:
        db: Motor database
        collection: Collection name
        query: Filter selecting one document
        update: Update operators ($set, $setOnInsert, $push ...)
        create: Insert a document when nothing matches. When False a missing
            document is reported as None instead of being created.

    Returns:
        The document after the update, or None if create=False and no
        document matched

    Raises:
        ConflictError: If the write violates a unique index
        StoreError: On any other store failure
    """
    try:
        document = await db[collection].find_one_and_update(
            query,
            update,
            projection=_PROJECTION,
            upsert=create,
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError as e:
        logger.warning(
            f"Unique constraint violated in {collection}",
            extra={"collection": collection, "error": str(e)},
        )
        raise ConflictError(
            f"Write to '{collection}' conflicts with an existing document",
            details={"collection": collection},
        ) from e
    except PyMongoError as e:
        logger.error(
            f"Store write failed in {collection}",
            extra={"collection": collection, "error": str(e)},
        )
        raise StoreError(
            f"Write to '{collection}' failed", details={"collection": collection}
        ) from e

    logger.debug(f"Upserted document in {collection}", extra={"collection": collection})
    return document


async def find_one(
    db: AsyncIOMotorDatabase, collection: str, query: dict[str, Any]
) -> dict[str, Any] | None:
    """
    Find a single document.

    Returns:
        The document, or None when nothing matches

    Raises:
        StoreError: On store failure
    """
    try:
        return await db[collection].find_one(query, projection=_PROJECTION)
    except PyMongoError as e:
        logger.error(
            f"Store read failed in {collection}",
            extra={"collection": collection, "error": str(e)},
        )
        raise StoreError(
            f"Read from '{collection}' failed", details={"collection": collection}
        ) from e
