"""Link Pydantic schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

TITLE_MAX_LENGTH = 100
ICON_MAX_LENGTH = 50

_http_url = TypeAdapter(HttpUrl)


def validate_title(value: str) -> str:
    """Strip a title and check it is non-empty and short enough.

    Raises ValueError with a user-facing message otherwise.
    """
    title = value.strip()
    if not title:
        raise ValueError("Title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be {TITLE_MAX_LENGTH} characters or less")
    return title


def validate_url(value: str) -> str:
    """Check a URL is absolute http(s) with a host.

    The stripped input is returned as typed; pydantic's normalised form
    (e.g. an added trailing slash) is only used for the check.
    """
    url = value.strip()
    if not url:
        raise ValueError("URL is required")
    try:
        _http_url.validate_python(url)
    except PydanticValidationError:
        raise ValueError("URL must be a valid absolute http:// or https:// URL") from None
    return url


def validate_icon(value: str | None) -> str | None:
    """Normalise an optional icon identifier; blank means no icon."""
    if value is None:
        return None
    icon = value.strip()
    if not icon:
        return None
    if len(icon) > ICON_MAX_LENGTH:
        raise ValueError(f"Icon must be {ICON_MAX_LENGTH} characters or less")
    return icon


class LinkBase(BaseModel):
    """Base schema for link data."""

    title: str = Field(description="Display title", examples=["My blog"])
    url: str = Field(description="Absolute URL the link points to")
    icon: str | None = Field(default=None, description="Optional icon identifier")

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        return validate_title(v)

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        return validate_url(v)

    @field_validator("icon")
    @classmethod
    def check_icon(cls, v: str | None) -> str | None:
        return validate_icon(v)


class LinkCreate(LinkBase):
    """Schema for creating a new link."""

    is_active: bool = True
    metadata: dict[str, Any] | None = None


class LinkUpdate(BaseModel):
    """Schema for updating a link.

    Only fields explicitly sent are applied. `position` moves the link
    within the owner's sequence; the rest of the collection shifts to keep
    it contiguous.
    """

    title: str | None = None
    url: str | None = None
    icon: str | None = None
    is_active: bool | None = None
    position: int | None = Field(default=None, ge=0)
    metadata: dict[str, Any] | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str | None:
        return v if v is None else validate_title(v)

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str | None) -> str | None:
        return v if v is None else validate_url(v)

    @field_validator("icon")
    @classmethod
    def check_icon(cls, v: str | None) -> str | None:
        return validate_icon(v)


class LinkReorder(BaseModel):
    """Schema for replacing the order of the whole collection."""

    link_ids: list[UUID] = Field(
        description="Every link id of the owner, each exactly once, in the new order",
    )
    expected_versions: dict[UUID, int] | None = Field(
        default=None,
        description="Versions the client last read; a mismatch is a 409 conflict",
    )


class LinkResponse(BaseModel):
    """Schema for link response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    url: str
    icon: str | None
    position: int
    is_active: bool
    metadata: dict[str, Any] | None = Field(
        default=None,
        validation_alias="link_metadata",
    )
    version: int
    created_at: datetime
    updated_at: datetime


class LinkListResponse(BaseModel):
    """Schema for the owner's full, ordered link list."""

    items: list[LinkResponse]
    total: int


class PublicLinkResponse(BaseModel):
    """Link as shown on the public profile page."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    url: str
    icon: str | None
    position: int
