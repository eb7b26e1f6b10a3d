"""
Unit tests for the domain exception hierarchy and status mapping.
"""

import pytest

from donations.core.errors import (
    AuthorizationError,
    ConflictError,
    DonationsError,
    NotFoundError,
    StoreError,
    ValidationError,
    get_status_code,
)


class TestErrorHierarchy:
    def test_all_errors_share_base(self):
        for error in (
            ValidationError("name", " is required"),
            AuthorizationError("denied"),
            NotFoundError("missing"),
            StoreError("down"),
            ConflictError("taken"),
        ):
            assert isinstance(error, DonationsError)

    def test_conflict_is_a_retryable_store_error(self):
        error = ConflictError("taken")

        assert isinstance(error, StoreError)
        assert error.retryable is True
        assert StoreError("down").retryable is False

    def test_details_default_to_empty_dict(self):
        assert NotFoundError("missing").details == {}

    def test_validation_error_carries_field(self):
        error = ValidationError("email", " is invalid")

        assert error.field == "email"
        assert error.message == "email is invalid"
        assert error.details == {"field": "email"}


class TestStatusCodes:
    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (ValidationError("name", " is required"), 400),
            (AuthorizationError("denied"), 403),
            (NotFoundError("missing"), 404),
            (ConflictError("taken"), 409),
            (StoreError("down"), 500),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_get_status_code(self, error, status):
        assert get_status_code(error) == status
