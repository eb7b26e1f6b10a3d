"""
Field validation pipeline.

Each check_* function evaluates every rule for one field value and returns
the message fragment of the first failing rule, or None when the value
passes. Rules tolerate values of the wrong type so a field's rules can all
be evaluated eagerly; the type rule that runs first reports the problem.

first_error() scans (field_name, result) pairs in order and turns the first
failure into a ValidationError whose text is "<field_name><message>".

Usage:
    raise_for_errors(
        [
            ("name", check_string(name)),
            ("email", check_email(email)),
            ("password", check_password(password)),
        ]
    )
"""

import re
from collections.abc import Callable, Iterable
from typing import Any

from donations.core.errors import ValidationError
from donations.domain.enums import Category, ObjectType, SortDirection

# Message fragments, appended to the field name
MISSING = " is required"
NOT_STRING = " must be a string"
EMPTY_STRING = " must not be empty"
NOT_NUMBER = " must be a number"
NOT_ARRAY = " must be an array"
INVALID = " is invalid"
PASSWORD_LETTER = " must contain at least one letter"
PASSWORD_NUMBER = " must contain at least one number"
INVALID_SORT = " must be 'asc' or 'desc'"
INVALID_IMAGE_URL = " must be a valid image URL"
INVALID_CATEGORY = " is not a valid category"
INVALID_OBJECT_TYPE = " is not a valid object type"

PASSWORD_MIN_LENGTH = 8
CURRENCY_MIN, CURRENCY_MAX = 1, 10000
PAGE_SIZE_MIN, PAGE_SIZE_MAX = 1, 20
DEFAULT_PAGE_SIZE = 20

EMAIL_PATTERN = re.compile(r"^[\w.+-]+@[\w-]+(?:\.[\w-]+)*\.[A-Za-z]{2,}$")
IMAGE_URL_PATTERN = re.compile(
    r"^https?://(?:[a-z\-]+\.)+[a-z]{2,6}(?:/[^/#?]+)+\.(?:jpe?g|gif|png)$"
)

CheckResult = tuple[str, str | None]


# ============================================================================
# Pipeline
# ============================================================================


def first_failure(results: Iterable[str | None]) -> str | None:
    """Return the first non-empty message in results."""
    for result in results:
        if result:
            return result
    return None


def first_error(checks: Iterable[CheckResult]) -> ValidationError | None:
    """
    Return the first failing check as a ValidationError.

    Args:
        checks: Ordered (field_name, check result) pairs

    Returns:
        ValidationError for the first failure, or None when every field passes
    """
    for field, message in checks:
        if message:
            return ValidationError(field, message)
    return None


def raise_for_errors(checks: Iterable[CheckResult]) -> None:
    """
    Raise the first failing check.

    Raises:
        ValidationError: If any check failed
    """
    error = first_error(checks)
    if error is not None:
        raise error


# ============================================================================
# Rules
# ============================================================================


def _invalid_string(value: Any) -> str | None:
    if value is None:
        return MISSING
    if not isinstance(value, str):
        return NOT_STRING
    if value == "":
        return EMPTY_STRING
    return None


def _invalid_number(value: Any) -> str | None:
    if value is None:
        return MISSING
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, int | float):
        return NOT_NUMBER
    return None


def _invalid_array(value: Any) -> str | None:
    if not isinstance(value, list):
        return NOT_ARRAY
    return None


def _invalid_length(
    value: Any, min_length: int | None = None, max_length: int | None = None
) -> str | None:
    if not isinstance(value, str):
        return None
    if min_length and len(value) < min_length:
        return f" must be at least {min_length} characters"
    if max_length and len(value) > max_length:
        return f" must be less than {max_length} characters"
    return None


def _invalid_size(
    value: Any, minimum: float | None = None, maximum: float | None = None
) -> str | None:
    if _invalid_number(value):
        return None
    if minimum is not None and value < minimum:
        return f" must be at least {minimum}"
    if maximum is not None and value > maximum:
        return f" must be at most {maximum}"
    return None


def _invalid_email(value: Any) -> str | None:
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        return INVALID
    return None


def _invalid_password(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    if not re.search(r"[a-zA-Z]", value):
        return PASSWORD_LETTER
    if not re.search(r"\d", value):
        return PASSWORD_NUMBER
    return None


def _invalid_enum(value: Any, enum: type, message: str) -> str | None:
    if isinstance(value, str) and value in {member.value for member in enum}:
        return None
    return message


def _invalid_image_url(value: Any) -> str | None:
    if not isinstance(value, str) or not IMAGE_URL_PATTERN.match(value):
        return INVALID_IMAGE_URL
    return None


# ============================================================================
# Field checks
# ============================================================================


def check_string(value: Any) -> str | None:
    """Non-empty string."""
    return first_failure([_invalid_string(value)])


def check_number(value: Any) -> str | None:
    return first_failure([_invalid_number(value)])


def check_positive_number(value: Any) -> str | None:
    return first_failure([_invalid_number(value), _invalid_size(value, 0)])


def check_currency(value: Any) -> str | None:
    """Donation amount between 1 and 10000."""
    return first_failure(
        [_invalid_number(value), _invalid_size(value, CURRENCY_MIN, CURRENCY_MAX)]
    )


def check_page_size(value: Any) -> str | None:
    return first_failure(
        [_invalid_number(value), _invalid_size(value, PAGE_SIZE_MIN, PAGE_SIZE_MAX)]
    )


def check_array(value: Any) -> str | None:
    return first_failure([_invalid_array(value)])


def check_email(value: Any) -> str | None:
    return first_failure([_invalid_string(value), _invalid_email(value)])


def check_password(value: Any) -> str | None:
    """At least 8 characters with at least one letter and one digit."""
    return first_failure(
        [
            _invalid_string(value),
            _invalid_length(value, PASSWORD_MIN_LENGTH),
            _invalid_password(value),
        ]
    )


def check_sort(value: Any) -> str | None:
    return first_failure(
        [_invalid_string(value), _invalid_enum(value, SortDirection, INVALID_SORT)]
    )


def check_category(value: Any) -> str | None:
    return first_failure(
        [_invalid_string(value), _invalid_enum(value, Category, INVALID_CATEGORY)]
    )


def check_object_type(value: Any) -> str | None:
    return first_failure(
        [_invalid_string(value), _invalid_enum(value, ObjectType, INVALID_OBJECT_TYPE)]
    )


def check_image_url(value: Any) -> str | None:
    return first_failure([_invalid_string(value), _invalid_image_url(value)])


def check_image_url_array(value: Any) -> str | None:
    """
    List of image URLs.

    Item failures are prefixed with the item index, so the pipeline reports
    e.g. "images[2] must be a valid image URL".
    """
    array_error = _invalid_array(value)
    if array_error:
        return array_error
    for index, item in enumerate(value):
        item_error = check_image_url(item)
        if item_error:
            return f"[{index}]{item_error}"
    return None


def check_optional(check: Callable[[Any], str | None], value: Any) -> str | None:
    """Apply check only when a value was supplied."""
    if value is None:
        return None
    return check(value)


def check_paging(page_size: Any = None, sort: Any = None) -> ValidationError | None:
    """
    Validate listing parameters, substituting the defaults for unset values.

    Args:
        page_size: Number of objects to return (1-20, default 20)
        sort: "asc" or "desc" (default "asc")

    Returns:
        ValidationError for the first invalid parameter, or None
    """
    if page_size is None:
        page_size = DEFAULT_PAGE_SIZE
    if sort is None:
        sort = SortDirection.ASC.value
    return first_error(
        [
            ("pageSize", check_page_size(page_size)),
            ("sort", check_sort(sort)),
        ]
    )
