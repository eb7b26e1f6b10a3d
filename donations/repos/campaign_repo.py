"""
Repository layer for Campaign data access.

Campaigns belong to a charity and are owned by that charity's token.
Changing a campaign's category does not touch the category snapshot held
by existing posts.
"""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from donations.core.security import DecodedToken
from donations.core.validation import (
    check_category,
    check_optional,
    check_string,
    raise_for_errors,
)
from donations.domain.models import Campaign, Charity
from donations.repos.common import create_entity, edit_entity, get_entity
from donations.repos.formatting import DisplayJoin, format_entity


CAMPAIGN_JOINS = (
    DisplayJoin(
        reference="charity",
        target=Charity,
        fields={"name": "charityName", "logo": "charityLogo"},
    ),
)


async def create_campaign(
    db: AsyncIOMotorDatabase,
    *,
    charity: str,
    name: str,
    category: str,
    description: str | None = None,
) -> Campaign:
    """
    Create a new campaign for a charity.

    The caller attaches it to the charity afterwards with
    charity_repo.add_campaign(), which checks ownership.

    Raises:
        ValidationError: If a field is invalid
    """
    raise_for_errors(
        [
            ("charity", check_string(charity)),
            ("name", check_string(name)),
            ("category", check_category(category)),
            ("description", check_optional(check_string, description)),
        ]
    )
    fields = {"charity": charity, "name": name, "category": category}
    if description is not None:
        fields["description"] = description
    return await create_entity(db, Campaign, fields)


async def get_campaign(db: AsyncIOMotorDatabase, campaign_id: str) -> Campaign:
    return await get_entity(db, Campaign, campaign_id)


async def edit_campaign(
    db: AsyncIOMotorDatabase,
    campaign_id: str,
    token: DecodedToken | dict[str, Any] | None,
    *,
    name: str | None = None,
    description: str | None = None,
    category: str | None = None,
) -> Campaign:
    """
    Edit a campaign (partial update). Only the owning charity may edit it.

    Raises:
        ValidationError: If a supplied field is invalid
        NotFoundError: If the campaign does not exist
        AuthorizationError: If token.charity is not the campaign's charity
    """
    raise_for_errors(
        [
            ("name", check_optional(check_string, name)),
            ("description", check_optional(check_string, description)),
            ("category", check_optional(check_category, category)),
        ]
    )
    return await edit_entity(
        db,
        Campaign,
        campaign_id,
        token,
        {"name": name, "description": description, "category": category},
    )


async def format_campaign(db: AsyncIOMotorDatabase, campaign: Campaign) -> dict[str, Any]:
    return await format_entity(db, campaign, CAMPAIGN_JOINS)
