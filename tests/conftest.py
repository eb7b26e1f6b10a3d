"""
Pytest configuration and shared fixtures.

Provides:
- anyio backend pinned to asyncio (Motor only runs on asyncio)
- db: a fresh in-memory Motor-compatible database per test, with the
  unique indexes the repositories rely on
- password_hasher: deterministic stand-in for the real hasher
- Factories creating a charity, campaign, user and post in the database
"""

from __future__ import annotations

import os
import sys
import uuid
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]

# Add package root to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402 (import after path setup)
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

from donations.core.db import ensure_unique_indexes  # noqa: E402
from donations.domain.enums import Category  # noqa: E402
from donations.domain.models import Campaign, Charity, Post, User  # noqa: E402
from donations.repos import campaign_repo, charity_repo, post_repo, user_repo  # noqa: E402

IMAGE_URL = "https://images.example.com/posts/beach-cleanup.jpg"
SHAREABLE_IMAGE_URL = "https://images.example.com/shareable/beach-cleanup.png"
LOGO_URL = "https://cdn.example.org/logos/helping-hands.png"


# Per AnyIO testing docs: https://anyio.readthedocs.io/en/stable/testing.html
@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def db() -> Any:
    """Fresh in-memory database with unique indexes declared."""
    client = AsyncMongoMockClient()
    database = client[f"donations_test_{uuid.uuid4().hex}"]
    await ensure_unique_indexes(database)
    return database


@pytest.fixture
def password_hasher():
    def _hash(password: str) -> str:
        return f"hashed:{password[::-1]}"

    return _hash


# ============================================================================
# Entity factories
# ============================================================================


async def acreate_charity(db: Any, name: str = "Helping Hands") -> Charity:
    return await charity_repo.create_charity(db, name=name, charity_token=str(uuid.uuid4()))


async def acreate_campaign(
    db: Any, charity: Charity, category: str = Category.ENVIRONMENT.value
) -> Campaign:
    return await campaign_repo.create_campaign(
        db,
        charity=charity.id,
        name="Clean Beaches",
        category=category,
        description="Removing plastic from the coastline",
    )


async def acreate_user(db: Any, email: str = "donor@example.com", name: str = "Dana") -> User:
    return await user_repo.create_user(
        db,
        name=name,
        email=email,
        password="abcd1234",
        password_hasher=lambda password: f"hashed:{password}",
    )


async def acreate_post(db: Any, user: User, campaign: Campaign, caption: str | None = None) -> Post:
    return await post_repo.create_post(
        db,
        user=user.id,
        campaign=campaign,
        image=IMAGE_URL,
        shareable_image=SHAREABLE_IMAGE_URL,
        caption=caption,
    )


@pytest.fixture
async def charity(db: Any) -> Charity:
    return await acreate_charity(db)


@pytest.fixture
async def campaign(db: Any, charity: Charity) -> Campaign:
    return await acreate_campaign(db, charity)


@pytest.fixture
async def user(db: Any) -> User:
    return await acreate_user(db)


@pytest.fixture
async def post(db: Any, user: User, campaign: Campaign) -> Post:
    return await acreate_post(db, user, campaign, caption="Saturday cleanup crew")
