"""
Read-time composite views.

An entity's client view is its own document plus display fields copied
from the entities it references (a post shows its charity's name and logo,
its campaign's name and its author's name). The copies are rebuilt on
every read and never stored.

Lookups for the different references are independent and run concurrently.
A reference that does not resolve (absent or erased target) only drops its
group of display fields; store failures still propagate.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from donations.domain.models import BaseObject
from donations.repos.gateway import find_one

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayJoin:
    """
    Copy whitelisted fields of a referenced entity onto the view.

    Attributes:
        reference: Stored key on the entity holding the referenced id
        target: Model of the referenced entity
        fields: Target document key -> view key
    """

    reference: str
    target: type[BaseObject]
    fields: Mapping[str, str]


async def _resolve(
    db: AsyncIOMotorDatabase, join: DisplayJoin, reference_id: Any
) -> dict[str, Any]:
    if not reference_id:
        return {}

    document = await find_one(
        db,
        join.target.collection.value,
        {"id": reference_id, "erased": {"$ne": True}},
    )
    if document is None:
        logger.debug(
            f"Unresolved {join.reference} reference: {reference_id}",
            extra={"reference": join.reference, "id": reference_id},
        )
        return {}

    return {
        view_key: document[source_key]
        for source_key, view_key in join.fields.items()
        if source_key in document
    }


async def format_entity(
    db: AsyncIOMotorDatabase,
    entity: BaseObject,
    joins: Iterable[DisplayJoin] = (),
    hidden: Iterable[str] = (),
) -> dict[str, Any]:
    """
    Build the client view of an entity.

    Args:
        db: Motor database
        entity: Entity to format
        joins: Referenced entities to pull display fields from
        hidden: Stored keys never returned to clients

    Returns:
        The entity's own fields merged with the resolved display fields
    """
    view = entity.to_document()
    for key in hidden:
        view.pop(key, None)

    joins = tuple(joins)
    resolved = await asyncio.gather(
        *(_resolve(db, join, view.get(join.reference)) for join in joins)
    )
    for display_fields in resolved:
        view.update(display_fields)

    return view
