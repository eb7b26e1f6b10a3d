"""
Common repository functions shared by every entity repository.

Each entity repository validates its own parameters and then delegates to
these steps:
- create_entity: allocate id -> build document -> write once
- edit_entity: load -> authorize -> sparse $set guarded on lastModified
- append_reference: load -> authorize (unless exempt) -> atomic $push guarded
  on lastModified

Mutations on existing entities always load the document first, so an
unknown id fails with NotFoundError and ownership is decided against the
stored state before anything is written.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from motor.motor_asyncio import AsyncIOMotorDatabase

from donations.core.config import settings
from donations.core.dates import next_modified, now_ms
from donations.core.errors import ConflictError, NotFoundError
from donations.core.security import DecodedToken, require_ownership
from donations.core.validation import check_object_type, check_string, raise_for_errors
from donations.domain.enums import ObjectType
from donations.domain.models import MODELS_BY_TYPE, BaseObject
from donations.repos.gateway import find_one, upsert
from donations.repos.identifiers import allocate

__all__ = [
    "get_entity",
    "get_by_object_type",
    "create_entity",
    "edit_entity",
    "append_reference",
]

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseObject)


def _document_key(model: type[BaseObject], attribute: str) -> str:
    """Map a model attribute to its stored (camelCase) key."""
    field = model.model_fields[attribute]
    return field.alias or attribute


def _not_found(model: type[BaseObject], entity_id: str) -> NotFoundError:
    logger.warning(f"{model.__name__} not found: {entity_id}")
    return NotFoundError(
        f"{model.__name__} '{entity_id}' not found",
        details={"object_type": model.kind.value, "id": entity_id},
    )


async def get_entity(
    db: AsyncIOMotorDatabase, model: type[EntityT], entity_id: str
) -> EntityT:
    """
    Retrieve a single entity by id.

    Args:
        db: Motor database
        model: Entity model class
        entity_id: Entity identifier

    Returns:
        The entity

    Raises:
        NotFoundError: If no document has this id
    """
    document = await find_one(db, model.collection.value, {"id": entity_id})
    if document is None:
        raise _not_found(model, entity_id)

    logger.debug(f"Retrieved {model.__name__}: {entity_id}")
    return model.model_validate(document)


async def get_by_object_type(
    db: AsyncIOMotorDatabase, object_type: str, entity_id: str
) -> BaseObject:
    """
    Retrieve an entity given its object type name ("post", "charity" ...).

    Raises:
        ValidationError: If the object type is unknown or the id is empty
        NotFoundError: If no document has this id
    """
    raise_for_errors(
        [
            ("objectType", check_object_type(object_type)),
            ("id", check_string(entity_id)),
        ]
    )
    model = MODELS_BY_TYPE[ObjectType(object_type)]
    return await get_entity(db, model, entity_id)


async def create_entity(
    db: AsyncIOMotorDatabase, model: type[EntityT], fields: dict[str, Any]
) -> EntityT:
    """
    Create a new entity with a freshly allocated id.

    The document is written with $setOnInsert keyed by the new id. If the
    store hands back a different document, another writer claimed the same
    id between allocation and write, and nothing of ours was stored.

    Args:
        db: Motor database
        model: Entity model class
        fields: Validated entity fields, keyed by model attribute name

    Returns:
        The created entity

    Raises:
        ConflictError: If the id was claimed concurrently (retryable)
        StoreError: On store failure
    """
    collection = model.collection.value
    entity_id = await allocate(db, collection)

    stamp = now_ms()
    entity = model(id=entity_id, date_created=stamp, last_modified=stamp, **fields)
    document = entity.to_document()

    stored = await upsert(db, collection, {"id": entity_id}, {"$setOnInsert": document})
    if stored != document:
        logger.warning(
            f"Identifier claimed concurrently in {collection}: {entity_id}",
            extra={"collection": collection, "id": entity_id},
        )
        raise ConflictError(
            f"Identifier '{entity_id}' was claimed by another write",
            details={"collection": collection, "id": entity_id},
        )

    logger.info(
        f"Created {model.__name__}: {entity_id}",
        extra={"object_type": model.kind.value, "id": entity_id},
    )
    return entity
async def _write_guarded(
    db: AsyncIOMotorDatabase,
    model: type[EntityT],
    entity_id: str,
    token: DecodedToken | dict[str, Any] | None,
    build_update: Callable[[int], dict[str, Any]],
    *,
    authorize: bool = True,
) -> EntityT:
    """
    Load, authorize and write an existing entity, guarded on lastModified.

    The write only matches while the stored lastModified still equals the
    loaded one. When another mutation lands in between, the entity is
    reloaded and the write retried against the fresh state, so every
    successful mutation stamps a strictly greater lastModified.

    Args:
        db: Motor database
        model: Entity model class
        entity_id: Entity identifier
        token: Decoded token of the caller
        build_update: Builds the update document from the new lastModified
        authorize: Check ownership against each loaded state

    Returns:
        The updated entity

    Raises:
        NotFoundError: If the entity does not exist (or vanished meanwhile)
        AuthorizationError: If authorize is set and the token does not own the entity
        ConflictError: If every attempt lost to a concurrent mutation (retryable)
    """
    collection = model.collection.value
    attempts = settings.write_max_attempts

    for attempt in range(1, attempts + 1):
        entity = await get_entity(db, model, entity_id)
        if authorize:
            require_ownership(entity, token, model.kind)

        query = {"id": entity_id, "lastModified": entity.last_modified}
        update = build_update(next_modified(entity.last_modified))
        document = await upsert(db, collection, query, update, create=False)
        if document is not None:
            return model.model_validate(document)

        logger.warning(
            f"Concurrent modification of {model.__name__} {entity_id} "
            f"(attempt {attempt}/{attempts})",
            extra={"collection": collection, "id": entity_id, "attempt": attempt},
        )

    raise ConflictError(
        f"{model.__name__} '{entity_id}' was modified concurrently",
        details={"collection": collection, "id": entity_id, "attempts": attempts},
    )


async def edit_entity(
    db: AsyncIOMotorDatabase,
    model: type[EntityT],
    entity_id: str,
    token: DecodedToken | dict[str, Any] | None,
    changes: dict[str, Any],
) -> EntityT:
    """
    Update the supplied fields of an existing entity (partial update).

    Only fields with a value other than None are written; omitted fields
    keep their stored values. lastModified always advances.

    Args:
        db: Motor database
        model: Entity model class
        entity_id: Entity identifier
        token: Decoded token of the caller
        changes: Validated new values keyed by model attribute name

    Returns:
        The updated entity

    Raises:
        NotFoundError: If the entity does not exist
        AuthorizationError: If the token does not own the entity
        ConflictError: If concurrent mutations kept winning (retryable)
    """
    update_data = {
        _document_key(model, key): value for key, value in changes.items() if value is not None
    }

    def build_update(stamp: int) -> dict[str, Any]:
        return {"$set": {**update_data, "lastModified": stamp}}

    entity = await _write_guarded(db, model, entity_id, token, build_update)

    logger.info(
        f"Updated {model.__name__}: {entity_id}",
        extra={"id": entity_id, "updated_fields": sorted([*update_data, "lastModified"])},
    )
    return entity


async def append_reference(
    db: AsyncIOMotorDatabase,
    model: type[EntityT],
    entity_id: str,
    field: str,
    child_id: str,
    token: DecodedToken | dict[str, Any] | None = None,
    *,
    authorize: bool = True,
) -> EntityT:
    """
    Append child_id to one of the entity's reference lists.

    Uses the store's atomic $push, so the list is never rewritten from a
    stale copy; concurrent appends are all preserved.

    Args:
        db: Motor database
        model: Entity model class
        entity_id: Entity identifier
        field: Reference list attribute ("users", "donations" ...)
        child_id: Identifier to append
        token: Decoded token of the caller
        authorize: Check ownership before writing. Only appends that are part
            of an in-progress creation sequence pass False.

    Returns:
        The updated entity

    Raises:
        NotFoundError: If the entity does not exist
        AuthorizationError: If authorize is set and the token does not own the entity
        ConflictError: If concurrent mutations kept winning (retryable)
    """
    key = _document_key(model, field)

    def build_update(stamp: int) -> dict[str, Any]:
        return {"$push": {key: child_id}, "$set": {"lastModified": stamp}}

    entity = await _write_guarded(
        db, model, entity_id, token, build_update, authorize=authorize
    )

    logger.info(
        f"Appended to {model.__name__}.{field}: {entity_id}",
        extra={"id": entity_id, "field": field, "child_id": child_id},
    )
    return entity
