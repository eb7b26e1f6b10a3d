"""
Unit tests for donation_repo.
"""

import pytest

from donations.core.errors import NotFoundError, ValidationError
from donations.repos import donation_repo


class TestCreateDonation:
    @pytest.mark.anyio
    async def test_copies_post_context(self, db, user, post):
        donation = await donation_repo.create_donation(db, user=user.id, post=post, amount=25)

        assert donation.post == post.id
        assert donation.campaign == post.campaign
        assert donation.charity == post.charity
        assert donation.amount == 25

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        ("amount", "message"),
        [
            (0, "amount must be at least 1"),
            (10001, "amount must be at most 10000"),
            ("25", "amount must be a number"),
        ],
    )
    async def test_amount_out_of_range(self, db, user, post, amount, message):
        with pytest.raises(ValidationError, match=message):
            await donation_repo.create_donation(db, user=user.id, post=post, amount=amount)

        assert await db["donations"].count_documents({}) == 0


class TestGetDonation:
    @pytest.mark.anyio
    async def test_round_trip(self, db, user, post):
        donation = await donation_repo.create_donation(db, user=user.id, post=post, amount=10)

        assert await donation_repo.get_donation(db, donation.id) == donation

    @pytest.mark.anyio
    async def test_unknown_id(self, db):
        with pytest.raises(NotFoundError):
            await donation_repo.get_donation(db, "missing")


class TestFormatDonation:
    @pytest.mark.anyio
    async def test_includes_donor_and_charity_names(self, db, user, post):
        donation = await donation_repo.create_donation(db, user=user.id, post=post, amount=10)

        view = await donation_repo.format_donation(db, donation)

        assert view["userName"] == "Dana"
        assert view["charityName"] == "Helping Hands"
        assert view["amount"] == 10
