"""
Domain enums shared by the validators, models and repositories.

These enums provide type-safe representations of the enumerated values
stored in documents and accepted from clients.
"""

from enum import Enum


class ObjectType(str, Enum):
    """Type of entity - also the ownership relation key."""

    USER = "user"
    POST = "post"
    CHARITY = "charity"
    CAMPAIGN = "campaign"
    UPDATE = "update"
    DONATION = "donation"


class Category(str, Enum):
    """Campaign category. Posts carry a snapshot of their campaign's category."""

    ANIMALS = "animals"
    ARTS = "arts"
    COMMUNITY = "community"
    DISASTER_RELIEF = "disaster-relief"
    EDUCATION = "education"
    ENVIRONMENT = "environment"
    HEALTH = "health"
    HUNGER = "hunger"
    POVERTY = "poverty"


class SortDirection(str, Enum):
    """Sort order accepted by listing routes."""

    ASC = "asc"
    DESC = "desc"


class Collection(str, Enum):
    """Document store collection per entity type."""

    USERS = "users"
    CHARITIES = "charities"
    CAMPAIGNS = "campaigns"
    POSTS = "posts"
    DONATIONS = "donations"
    UPDATES = "updates"
