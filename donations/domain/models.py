"""
Document models for the donations core.

Every entity model inherits BaseObject, so the identity, timestamps and
erasure slot are declared once and embedded in each stored document.
Documents use camelCase keys; the models expose snake_case attributes
with the stored names as aliases.
"""

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

from donations.domain.enums import Collection, ObjectType


class BaseObject(BaseModel):
    """Fields shared by every stored entity."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: ClassVar[ObjectType]
    collection: ClassVar[Collection]

    id: str
    date_created: int | None = Field(default=None, alias="dateCreated")
    last_modified: int | None = Field(default=None, alias="lastModified")
    # Logical deletion marker; rows are never removed
    erased: bool = False

    def to_document(self) -> dict[str, Any]:
        """Return the stored representation (camelCase keys, unset optionals omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class User(BaseObject):
    kind: ClassVar[ObjectType] = ObjectType.USER
    collection: ClassVar[Collection] = Collection.USERS

    name: str
    email: str
    password: str


class Charity(BaseObject):
    kind: ClassVar[ObjectType] = ObjectType.CHARITY
    collection: ClassVar[Collection] = Collection.CHARITIES

    name: str
    description: str = ""
    logo: str = ""
    charity_token: str = Field(alias="charityToken")
    users: list[str] = Field(default_factory=list)
    campaigns: list[str] = Field(default_factory=list)
    updates: list[str] = Field(default_factory=list)


class Campaign(BaseObject):
    kind: ClassVar[ObjectType] = ObjectType.CAMPAIGN
    collection: ClassVar[Collection] = Collection.CAMPAIGNS

    name: str
    description: str = ""
    category: str
    charity: str


class Post(BaseObject):
    """A user's post supporting a campaign; donations are attached to posts."""

    kind: ClassVar[ObjectType] = ObjectType.POST
    collection: ClassVar[Collection] = Collection.POSTS

    object_type: Literal["post"] = Field(default="post", alias="objectType")
    user: str
    campaign: str
    # Snapshot of the campaign's category when the post was created
    category: str
    charity: str
    image: str
    shareable_image: str = Field(alias="shareableImage")
    caption: str | None = None
    donations: list[str] = Field(default_factory=list)


class Donation(BaseObject):
    kind: ClassVar[ObjectType] = ObjectType.DONATION
    collection: ClassVar[Collection] = Collection.DONATIONS

    user: str
    post: str
    campaign: str
    charity: str
    amount: float


class Update(BaseObject):
    kind: ClassVar[ObjectType] = ObjectType.UPDATE
    collection: ClassVar[Collection] = Collection.UPDATES

    charity: str
    campaign: str | None = None
    title: str
    body: str = ""
    images: list[str] = Field(default_factory=list)


MODELS_BY_TYPE: dict[ObjectType, type[BaseObject]] = {
    ObjectType.USER: User,
    ObjectType.CHARITY: Charity,
    ObjectType.CAMPAIGN: Campaign,
    ObjectType.POST: Post,
    ObjectType.DONATION: Donation,
    ObjectType.UPDATE: Update,
}
