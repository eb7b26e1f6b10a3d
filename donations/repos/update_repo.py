"""
Repository layer for Update data access.

Updates are news items a charity publishes, optionally about one of its
campaigns, with a list of image URLs.
"""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from donations.core.security import DecodedToken
from donations.core.validation import (
    check_image_url_array,
    check_optional,
    check_string,
    raise_for_errors,
)
from donations.domain.models import Charity, Update
from donations.repos.common import create_entity, edit_entity, get_entity
from donations.repos.formatting import DisplayJoin, format_entity

UPDATE_JOINS = (
    DisplayJoin(
        reference="charity",
        target=Charity,
        fields={"name": "charityName", "logo": "charityLogo"},
    ),
)


async def create_update(
    db: AsyncIOMotorDatabase,
    *,
    charity: str,
    title: str,
    body: str | None = None,
    images: list[str] | None = None,
    campaign: str | None = None,
) -> Update:
    """
    Create a new update for a charity.

    The caller attaches it to the charity afterwards with
    charity_repo.add_update(), which checks ownership.

    Raises:
        ValidationError: If a field is invalid
    """
    raise_for_errors(
        [
            ("charity", check_string(charity)),
            ("title", check_string(title)),
            ("body", check_optional(check_string, body)),
            ("images", check_optional(check_image_url_array, images)),
            ("campaign", check_optional(check_string, campaign)),
        ]
    )
    fields: dict[str, Any] = {"charity": charity, "title": title, "campaign": campaign}
    if body is not None:
        fields["body"] = body
    if images is not None:
        fields["images"] = images
    return await create_entity(db, Update, fields)


async def get_update(db: AsyncIOMotorDatabase, update_id: str) -> Update:
    return await get_entity(db, Update, update_id)


async def edit_update(
    db: AsyncIOMotorDatabase,
    update_id: str,
    token: DecodedToken | dict[str, Any] | None,
    *,
    title: str | None = None,
    body: str | None = None,
    images: list[str] | None = None,
) -> Update:
    """
    Edit an update (partial update). A supplied images list replaces the old one.

    Raises:
        ValidationError: If a supplied field is invalid
        NotFoundError: If the update does not exist
        AuthorizationError: If token.charity is not the update's charity
    """
    raise_for_errors(
        [
            ("title", check_optional(check_string, title)),
            ("body", check_optional(check_string, body)),
            ("images", check_optional(check_image_url_array, images)),
        ]
    )
    return await edit_entity(
        db, Update, update_id, token, {"title": title, "body": body, "images": images}
    )


async def format_update(db: AsyncIOMotorDatabase, update: Update) -> dict[str, Any]:
    return await format_entity(db, update, UPDATE_JOINS)
