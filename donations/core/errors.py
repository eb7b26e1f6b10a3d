"""
Domain-specific exceptions for the donations data-access core.

These exceptions represent business logic violations and store failures.
The routing layer maps them to HTTP status codes with get_status_code().
"""

from typing import Any


class DonationsError(Exception):
    """Base exception for all donations core errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DonationsError):
    """
    Raised when a supplied field fails a type, shape or range rule.

    The message is the field name followed by the rule's message fragment,
    e.g. "password must be at least 8 characters".

    HTTP Status: 400 Bad Request
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}{message}", details={"field": field})
        self.field = field


class AuthorizationError(DonationsError):
    """
    Raised when the decoded token does not satisfy the entity's ownership predicate.

    HTTP Status: 403 Forbidden
    """

    pass


class NotFoundError(DonationsError):
    """
    Raised when a keyed operation targets a document that does not exist.

    Examples:
    - Editing a charity whose id was never allocated
    - Appending a donation to a post that has vanished

    HTTP Status: 404 Not Found
    """

    pass


class StoreError(DonationsError):
    """
    Raised for connectivity or constraint failures in the document store.

    HTTP Status: 500 Internal Server Error
    """

    retryable = False


class ConflictError(StoreError):
    """
    Raised when a write loses against a uniqueness constraint.

    Examples:
    - Two concurrent creates claimed the same identifier
    - Email address already registered

    The caller may retry the whole operation.

    HTTP Status: 409 Conflict
    """

    retryable = True


# HTTP Status Code Mapping
ERROR_STATUS_MAP = {
    ValidationError: 400,
    AuthorizationError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    StoreError: 500,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    return ERROR_STATUS_MAP.get(type(error), 500)
