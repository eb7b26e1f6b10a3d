"""
Unit tests for read-time views built by format_entity().
"""

from unittest.mock import AsyncMock, patch

import pytest

from donations.core.errors import StoreError
from donations.domain.models import Campaign, Charity, User
from donations.repos import post_repo
from donations.repos.formatting import DisplayJoin, format_entity


class TestFormatEntity:
    @pytest.mark.anyio
    async def test_without_joins_returns_own_fields(self, db, charity):
        view = await format_entity(db, charity)

        assert view == charity.to_document()

    @pytest.mark.anyio
    async def test_hidden_fields_removed(self, db, user):
        view = await format_entity(db, user, hidden=("password", "email"))

        assert "password" not in view
        assert "email" not in view
        assert view["name"] == "Dana"

    @pytest.mark.anyio
    async def test_only_whitelisted_fields_copied(self, db, post):
        join = DisplayJoin(reference="user", target=User, fields={"name": "userName"})

        view = await format_entity(db, post, [join])

        assert "userName" in view
        assert "email" not in view
        assert "password" not in view

    @pytest.mark.anyio
    async def test_erased_campaign_is_skipped(self, db, post):
        await db["campaigns"].update_one({"id": post.campaign}, {"$set": {"erased": True}})

        view = await post_repo.format_post(db, post)

        assert "campaignName" not in view
        assert "campaignDescription" not in view
        assert view["charityName"] == "Helping Hands"
        assert view["campaign"] == post.campaign

    @pytest.mark.anyio
    async def test_missing_reference_target_is_skipped(self, db, post):
        await db["users"].delete_one({"id": post.user})

        view = await post_repo.format_post(db, post)

        assert "userName" not in view
        assert view["campaignName"] == "Clean Beaches"

    @pytest.mark.anyio
    async def test_empty_reference_is_not_looked_up(self, db):
        campaign = Campaign(id="c1", name="Orphan", category="arts", charity="")
        join = DisplayJoin(reference="charity", target=Charity, fields={"name": "charityName"})

        with patch("donations.repos.formatting.find_one", AsyncMock()) as mock_find:
            view = await format_entity(db, campaign, [join])

        mock_find.assert_not_called()
        assert "charityName" not in view

    @pytest.mark.anyio
    async def test_store_failure_propagates(self, db, post):
        with patch(
            "donations.repos.formatting.find_one", AsyncMock(side_effect=StoreError("down"))
        ):
            with pytest.raises(StoreError):
                await post_repo.format_post(db, post)

    @pytest.mark.anyio
    async def test_view_is_not_stored(self, db, post):
        await post_repo.format_post(db, post)

        stored = await db["posts"].find_one({"id": post.id})
        assert "charityName" not in stored
