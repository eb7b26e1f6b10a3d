"""
Ownership checks for mutating operations.

Each entity type declares once which decoded-token field must equal which
entity field before the entity may be mutated. Every mutating repository
operation calls require_ownership() with the entity's type, so the rule is
applied identically everywhere.

The token is trusted verbatim: signature and expiry checks happen upstream.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from donations.core.errors import AuthorizationError
from donations.domain.enums import ObjectType

logger = logging.getLogger(__name__)


class DecodedToken(BaseModel):
    """Already-verified token claims identifying the caller."""

    model_config = ConfigDict(extra="allow")

    user: str | None = None
    charity: str | None = None


@dataclass(frozen=True)
class OwnershipPredicate:
    """token.<token_field> must equal entity.<entity_field>."""

    token_field: str
    entity_field: str

    def __call__(self, entity: Any, token: DecodedToken) -> bool:
        expected = getattr(token, self.token_field, None)
        if not expected:
            return False
        return expected == getattr(entity, self.entity_field, None)


OWNERSHIP_PREDICATES: dict[ObjectType, OwnershipPredicate] = {
    ObjectType.USER: OwnershipPredicate(token_field="user", entity_field="id"),
    ObjectType.CHARITY: OwnershipPredicate(token_field="charity", entity_field="id"),
    ObjectType.CAMPAIGN: OwnershipPredicate(token_field="charity", entity_field="charity"),
    ObjectType.POST: OwnershipPredicate(token_field="user", entity_field="user"),
    ObjectType.DONATION: OwnershipPredicate(token_field="user", entity_field="user"),
    ObjectType.UPDATE: OwnershipPredicate(token_field="charity", entity_field="charity"),
}


def as_token(token: DecodedToken | dict[str, Any] | None) -> DecodedToken:
    """Accept a decoded token as a model or a plain claims dict."""
    if isinstance(token, DecodedToken):
        return token
    return DecodedToken.model_validate(token or {})


def check_ownership(
    entity: Any, token: DecodedToken | dict[str, Any] | None, relation: ObjectType
) -> bool:
    """
    Check whether the token owns the entity.

    Args:
        entity: Entity model (or any object exposing the compared attribute)
        token: Decoded token
        relation: Entity type whose ownership predicate applies

    Returns:
        True if the token's field matches the entity's field
    """
    predicate = OWNERSHIP_PREDICATES[relation]
    return predicate(entity, as_token(token))


def require_ownership(
    entity: Any, token: DecodedToken | dict[str, Any] | None, relation: ObjectType
) -> None:
    """
    Ensure the token owns the entity before a write.

    Raises:
        AuthorizationError: If the ownership predicate fails
    """
    if check_ownership(entity, token, relation):
        logger.debug("Ownership check passed for %s %s", relation.value, entity.id)
        return

    logger.warning(
        "Access denied - token does not own %s %s",
        relation.value,
        entity.id,
        extra={"relation": relation.value, "entity_id": entity.id},
    )
    raise AuthorizationError(
        "Insufficient permissions",
        details={"relation": relation.value, "entity_id": entity.id},
    )
