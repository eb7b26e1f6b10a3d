"""
Repository layer for Post data access.

A post is a user's image supporting one campaign. It records the campaign's
charity and a snapshot of its category at creation time. Donations made
through the post are appended to its donations list.
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
from donations.domain.models import Campaign, Charity, Post, User
from donations.repos.common import append_reference, create_entity, edit_entity, get_entity
from donations.repos.formatting import DisplayJoin, format_entity

Token = DecodedToken | dict[str, Any] | None


POST_JOINS = (
    DisplayJoin(
        reference="charity",
        target=Charity,
        fields={
            "name": "charityName",
            "logo": "charityLogo",
            "description": "charityDescription",
        },
    ),
    DisplayJoin(
        reference="campaign",
        target=Campaign,
        fields={"name": "campaignName", "description": "campaignDescription"},
    ),
    DisplayJoin(reference="user", target=User, fields={"name": "userName"}),
)


def _blank_as_unset(caption: str | None) -> str | None:
    return None if caption == "" else caption


async def create_post(
    db: AsyncIOMotorDatabase,
    *,
    user: str,
    campaign: Campaign,
    image: str,
    shareable_image: str,
    caption: str | None = None,
) -> Post:
    """
    Create a new post supporting a campaign.

    Args:
        db: Motor database
        user: Id of the posting user
        campaign: Campaign the post supports; its charity and current
            category are copied onto the post
        image: Image URL
        shareable_image: Shareable image URL
        caption: Optional caption; an empty caption is left out

    Returns:
        Created Post

    Raises:
        ValidationError: If a field is invalid
    """
    caption = _blank_as_unset(caption)
    raise_for_errors(
        [
            ("user", check_string(user)),
            ("image", check_image_url(image)),
            ("shareableImage", check_image_url(shareable_image)),
            ("caption", check_optional(check_string, caption)),
        ]
    )
    return await create_entity(
        db,
        Post,
        {
            "user": user,
            "campaign": campaign.id,
            "category": campaign.category,
            "charity": campaign.charity,
            "image": image,
            "shareable_image": shareable_image,
            "caption": caption,
        },
    )


async def get_post(db: AsyncIOMotorDatabase, post_id: str) -> Post:
    return await get_entity(db, Post, post_id)


async def edit_post(
    db: AsyncIOMotorDatabase, post_id: str, token: Token, *, caption: str | None = None
) -> Post:
    """
    Edit a post's caption. Only the posting user may edit it.

    An empty caption leaves the stored one unchanged.

    Raises:
        ValidationError: If the caption is invalid
        NotFoundError: If the post does not exist
        AuthorizationError: If token.user is not the post's user
    """
    caption = _blank_as_unset(caption)
    raise_for_errors([("caption", check_optional(check_string, caption))])
    return await edit_entity(db, Post, post_id, token, {"caption": caption})


async def add_donation(
    db: AsyncIOMotorDatabase, post_id: str, donation_id: str, token: Token
) -> Post:
    raise_for_errors([("donation", check_string(donation_id))])
    return await append_reference(db, Post, post_id, "donations", donation_id, token)


async def format_post(db: AsyncIOMotorDatabase, post: Post) -> dict[str, Any]:
    """Post view with charity, campaign and user display fields."""
    return await format_entity(db, post, POST_JOINS)
