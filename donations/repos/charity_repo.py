"""
Repository layer for Charity data access.

A charity is owned by the token whose "charity" claim equals the charity's
id. Its users, campaigns and updates lists are append-only.
"""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from donations.core.security import DecodedToken
from donations.core.validation import (
    check_image_url,
    check_optional,
    check_string,
    raise_for_errors,
)
from donations.domain.models import Charity
from donations.repos.common import append_reference, create_entity, edit_entity, get_entity
from donations.repos.formatting import format_entity

Token = DecodedToken | dict[str, Any] | None


async def create_charity(
    db: AsyncIOMotorDatabase, *, name: str, charity_token: str
) -> Charity:
    """
    Create a new charity with empty users, campaigns and updates.

    Args:
        db: Motor database
        name: Charity name
        charity_token: Id of the charity token used to register

    Returns:
        Created Charity

    Raises:
        ValidationError: If a field is invalid
    """
    raise_for_errors(
        [
            ("name", check_string(name)),
            ("charityToken", check_string(charity_token)),
        ]
    )
    return await create_entity(db, Charity, {"name": name, "charity_token": charity_token})


async def get_charity(db: AsyncIOMotorDatabase, charity_id: str) -> Charity:
    return await get_entity(db, Charity, charity_id)


async def edit_charity(
    db: AsyncIOMotorDatabase,
    charity_id: str,
    token: Token,
    *,
    name: str | None = None,
    description: str | None = None,
    logo: str | None = None,
) -> Charity:
    """
    Edit a charity's name, description or logo (partial update).

    Raises:
        ValidationError: If a supplied field is invalid
        NotFoundError: If the charity does not exist
        AuthorizationError: If token.charity is not this charity
    """
    raise_for_errors(
        [
            ("name", check_optional(check_string, name)),
            ("description", check_optional(check_string, description)),
            ("logo", check_optional(check_image_url, logo)),
        ]
    )
    return await edit_entity(
        db,
        Charity,
        charity_id,
        token,
        {"name": name, "description": description, "logo": logo},
    )


async def add_user(db: AsyncIOMotorDatabase, charity_id: str, user_id: str) -> Charity:
    """
    Attach a user to the charity.

    No ownership check: this runs while the charity is still being set up by
    its registering user, before any token names the charity.
    """
    raise_for_errors([("user", check_string(user_id))])
    return await append_reference(db, Charity, charity_id, "users", user_id, authorize=False)


async def add_campaign(
    db: AsyncIOMotorDatabase, charity_id: str, campaign_id: str, token: Token
) -> Charity:
    raise_for_errors([("campaign", check_string(campaign_id))])
    return await append_reference(db, Charity, charity_id, "campaigns", campaign_id, token)


async def add_update(
    db: AsyncIOMotorDatabase, charity_id: str, update_id: str, token: Token
) -> Charity:
    raise_for_errors([("update", check_string(update_id))])
    return await append_reference(db, Charity, charity_id, "updates", update_id, token)


async def format_charity(db: AsyncIOMotorDatabase, charity: Charity) -> dict[str, Any]:
    return await format_entity(db, charity)
