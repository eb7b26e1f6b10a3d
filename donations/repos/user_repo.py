"""
Repository layer for User data access.

Emails are unique and stored lower-cased. Passwords are hashed by the
caller-supplied hasher; only the hash is stored and it is never returned
by format_user().
"""

import logging
from collections.abc import Callable
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from donations.core.errors import ConflictError, NotFoundError
from donations.core.security import DecodedToken
from donations.core.validation import (
    check_email,
    check_optional,
    check_password,
    check_string,
    raise_for_errors,
)
from donations.domain.models import User
from donations.repos.common import create_entity, edit_entity, get_entity
from donations.repos.formatting import format_entity
from donations.repos.gateway import find_one

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def create_user(
    db: AsyncIOMotorDatabase,
    *,
    name: str,
    email: str,
    password: str,
    password_hasher: Callable[[str], str],
) -> User:
    """
    Create a new user.

    Args:
        db: Motor database
        name: Display name
        email: Email address (unique, compared case-insensitively)
        password: Plain password; must be 8+ characters with a letter and a digit
        password_hasher: Turns the plain password into the stored hash

    Returns:
        Created User

    Raises:
        ValidationError: If a field is invalid
        ConflictError: If the email is already registered
    """
    raise_for_errors(
        [
            ("name", check_string(name)),
            ("email", check_email(email)),
            ("password", check_password(password)),
        ]
    )
    email = normalize_email(email)

    if await find_one(db, User.collection.value, {"email": email}) is not None:
        logger.warning("Email already registered", extra={"email": email})
        raise ConflictError("Email is already registered", details={"email": email})

    return await create_entity(
        db, User, {"name": name, "email": email, "password": password_hasher(password)}
    )


async def get_user(db: AsyncIOMotorDatabase, user_id: str) -> User:
    return await get_entity(db, User, user_id)


async def get_user_by_email(db: AsyncIOMotorDatabase, email: str) -> User:
    """
    Retrieve a user by email, e.g. to check credentials at login.

    Raises:
        ValidationError: If the email is malformed
        NotFoundError: If no user has this email
    """
    raise_for_errors([("email", check_email(email))])
    email = normalize_email(email)

    document = await find_one(db, User.collection.value, {"email": email})
    if document is None:
        logger.warning("User not found by email", extra={"email": email})
        raise NotFoundError("User not found", details={"email": email})
    return User.model_validate(document)


async def edit_user(
    db: AsyncIOMotorDatabase,
    user_id: str,
    token: DecodedToken | dict[str, Any] | None,
    *,
    name: str | None = None,
) -> User:
    """
    Edit a user's profile. Only the user themself may edit it.

    Raises:
        ValidationError: If a supplied field is invalid
        NotFoundError: If the user does not exist
        AuthorizationError: If token.user is not this user
    """
    raise_for_errors([("name", check_optional(check_string, name))])
    return await edit_entity(db, User, user_id, token, {"name": name})


async def format_user(db: AsyncIOMotorDatabase, user: User) -> dict[str, Any]:
    return await format_entity(db, user, hidden=("password",))
