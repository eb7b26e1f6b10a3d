"""
Unit tests for charity_repo, including the register -> attach user -> edit flow.
"""

import pytest

from donations.core.errors import AuthorizationError, NotFoundError, ValidationError
from donations.repos import charity_repo
from tests.conftest import LOGO_URL, acreate_charity, acreate_user


class TestCreateCharity:
    @pytest.mark.anyio
    async def test_starts_with_empty_lists(self, db):
        charity = await charity_repo.create_charity(
            db, name="Helping Hands", charity_token="token-123"
        )

        assert charity.users == []
        assert charity.campaigns == []
        assert charity.updates == []
        assert charity.charity_token == "token-123"

    @pytest.mark.anyio
    async def test_name_required(self, db):
        with pytest.raises(ValidationError, match="name is required"):
            await charity_repo.create_charity(db, name=None, charity_token="token-123")


class TestCharityLifecycle:
    @pytest.mark.anyio
    async def test_owner_edits_and_other_charity_is_denied(self, db):
        charity = await acreate_charity(db, name="Helping Hands")
        user = await acreate_user(db)

        charity = await charity_repo.add_user(db, charity.id, user.id)
        assert charity.users == [user.id]

        owner = {"user": user.id, "charity": charity.id}
        edited = await charity_repo.edit_charity(db, charity.id, owner, name="Helping Hands Inc")
        assert edited.name == "Helping Hands Inc"

        stranger = {"user": user.id, "charity": "other-id"}
        before = await db["charities"].find_one({"id": charity.id}, {"_id": False})
        with pytest.raises(AuthorizationError):
            await charity_repo.edit_charity(db, charity.id, stranger, name="Taken Over")

        after = await db["charities"].find_one({"id": charity.id}, {"_id": False})
        assert after == before
        assert after["name"] == "Helping Hands Inc"


class TestEditCharity:
    @pytest.mark.anyio
    async def test_partial_update_keeps_other_fields(self, db, charity):
        edited = await charity_repo.edit_charity(
            db, charity.id, {"charity": charity.id}, logo=LOGO_URL
        )

        assert edited.logo == LOGO_URL
        assert edited.name == charity.name
        assert edited.description == charity.description

    @pytest.mark.anyio
    async def test_invalid_logo_rejected(self, db, charity):
        with pytest.raises(ValidationError, match="logo must be a valid image URL"):
            await charity_repo.edit_charity(
                db, charity.id, {"charity": charity.id}, logo="https://cdn.example.org/logo.svg"
            )

    @pytest.mark.anyio
    async def test_unknown_charity(self, db):
        with pytest.raises(NotFoundError):
            await charity_repo.edit_charity(db, "missing", {"charity": "missing"}, name="x")


class TestCharityReferences:
    @pytest.mark.anyio
    async def test_add_user_needs_no_token(self, db, charity, user):
        updated = await charity_repo.add_user(db, charity.id, user.id)

        assert updated.users == [user.id]

    @pytest.mark.anyio
    async def test_add_campaign_requires_ownership(self, db, charity, campaign):
        with pytest.raises(AuthorizationError):
            await charity_repo.add_campaign(db, charity.id, campaign.id, {"charity": "other-id"})

        updated = await charity_repo.add_campaign(
            db, charity.id, campaign.id, {"charity": charity.id}
        )
        assert updated.campaigns == [campaign.id]

    @pytest.mark.anyio
    async def test_add_update_appends(self, db, charity):
        token = {"charity": charity.id}
        await charity_repo.add_update(db, charity.id, "update-1", token)
        updated = await charity_repo.add_update(db, charity.id, "update-2", token)

        assert updated.updates == ["update-1", "update-2"]
        assert updated.last_modified > charity.last_modified

    @pytest.mark.anyio
    async def test_empty_child_id_rejected(self, db, charity):
        with pytest.raises(ValidationError, match="user must not be empty"):
            await charity_repo.add_user(db, charity.id, "")


class TestFormatCharity:
    @pytest.mark.anyio
    async def test_view_contains_stored_fields(self, db, charity):
        view = await charity_repo.format_charity(db, charity)

        assert view["name"] == "Helping Hands"
        assert view["charityToken"] == charity.charity_token
        assert "_id" not in view
