"""
Authorization for the donations core.

Ownership predicates compare a field of the already-decoded token with a
field of the entity being mutated.
"""

from .ownership import (
    OWNERSHIP_PREDICATES,
    DecodedToken,
    OwnershipPredicate,
    as_token,
    check_ownership,
    require_ownership,
)

__all__ = [
    "OWNERSHIP_PREDICATES",
    "DecodedToken",
    "OwnershipPredicate",
    "as_token",
    "check_ownership",
    "require_ownership",
]
