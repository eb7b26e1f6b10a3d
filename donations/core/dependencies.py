"""
FastAPI dependency injection utilities.

Provides the database handle and the decoded token to route handlers.
Token verification is performed by upstream middleware, which stores the
decoded claims on request.state.token; this module only reads them.

Usage:
    @router.patch("/charities/{charity_id}")
    async def edit(charity_id: str, payload: CharityEdit, db: DbDep, token: TokenDep):
        return await charity_repo.edit_charity(db, charity_id, token, **payload.model_dump())
"""

from typing import Annotated

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from donations.core.db import get_database
from donations.core.observability import set_user_id
from donations.core.security import DecodedToken, as_token

# ============================================================================
# Database Dependencies
# ============================================================================


def get_db() -> AsyncIOMotorDatabase:
    """
    Database dependency for FastAPI endpoints.

    Returns:
        The application's Motor database
    """
    return get_database()


DbDep = Annotated[AsyncIOMotorDatabase, Depends(get_db)]


# ============================================================================
# Token Dependencies
# ============================================================================


def get_token(request: Request) -> DecodedToken:
    """
    Return the decoded token attached by the authentication middleware.

    A request without a token yields an empty token, which owns nothing.
    The acting user is recorded for structured logs.
    """
    token = as_token(getattr(request.state, "token", None))
    if token.user:
        set_user_id(token.user)
    return token


TokenDep = Annotated[DecodedToken, Depends(get_token)]
