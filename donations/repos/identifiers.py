"""
Identifier allocation.

Identifiers are random UUIDs in canonical string form, confirmed unused in
the target collection before they are handed out. Uniqueness is checked per
collection: the same identifier may exist in two different collections.
"""

import logging
import uuid

from motor.motor_asyncio import AsyncIOMotorDatabase

from donations.core.config import settings
from donations.core.errors import StoreError
from donations.repos.gateway import find_one

logger = logging.getLogger(__name__)


async def allocate(
    db: AsyncIOMotorDatabase, collection: str, max_attempts: int | None = None
) -> str:
    """
    Generate an identifier that no document in collection uses.

    Args:
        db: Motor database
        collection: Collection the identifier is for
        max_attempts: Collision retries before giving up
            (default: settings.identifier_max_attempts)

    Returns:
        Unused identifier string

    Raises:
        StoreError: If the uniqueness check fails or every attempt collided
    """
    attempts = max_attempts or settings.identifier_max_attempts

    for attempt in range(1, attempts + 1):
        identifier = str(uuid.uuid4())
        if await find_one(db, collection, {"id": identifier}) is None:
            return identifier

        logger.warning(
            f"Identifier collision in {collection} (attempt {attempt}/{attempts})",
            extra={"collection": collection, "attempt": attempt},
        )

    raise StoreError(
        f"Could not allocate a unique identifier in '{collection}'",
        details={"collection": collection, "attempts": attempts},
    )
