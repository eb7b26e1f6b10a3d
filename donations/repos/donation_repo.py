"""
Repository layer for Donation data access.

Donations are immutable records. The post's campaign and charity are copied
onto the donation when it is created.
"""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from donations.core.validation import check_currency, check_string, raise_for_errors
from donations.domain.models import Charity, Donation, Post, User
from donations.repos.common import create_entity, get_entity
from donations.repos.formatting import DisplayJoin, format_entity

DONATION_JOINS = (
    DisplayJoin(reference="user", target=User, fields={"name": "userName"}),
    DisplayJoin(
        reference="charity",
        target=Charity,
        fields={"name": "charityName", "logo": "charityLogo"},
    ),
)


async def create_donation(
    db: AsyncIOMotorDatabase, *, user: str, post: Post, amount: float
) -> Donation:
    """
    Record a donation made through a post.

    The caller attaches it to the post afterwards with post_repo.add_donation().

    Args:
        db: Motor database
        user: Id of the donating user
        post: Post the donation was made through
        amount: Amount in currency units (1-10000)

    Raises:
        ValidationError: If a field is invalid
    """
    raise_for_errors(
        [
            ("user", check_string(user)),
            ("amount", check_currency(amount)),
        ]
    )
    return await create_entity(
        db,
        Donation,
        {
            "user": user,
            "post": post.id,
            "campaign": post.campaign,
            "charity": post.charity,
            "amount": amount,
        },
    )


async def get_donation(db: AsyncIOMotorDatabase, donation_id: str) -> Donation:
    return await get_entity(db, Donation, donation_id)


async def format_donation(db: AsyncIOMotorDatabase, donation: Donation) -> dict[str, Any]:
    return await format_entity(db, donation, DONATION_JOINS)
