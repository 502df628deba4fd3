"""Pydantic schemas."""

from linkfolio.schemas.profile import PublicPageResponse, PublicProfileResponse
from linkfolio.schemas.link import (
    LinkBase,
    LinkCreate,
    LinkListResponse,
    LinkReorder,
    LinkResponse,
    LinkUpdate,
    PublicLinkResponse,
)

__all__ = [
    "PublicPageResponse",
    "PublicProfileResponse",
    "LinkBase",
    "LinkCreate",
    "LinkListResponse",
    "LinkReorder",
    "LinkResponse",
    "LinkUpdate",
    "PublicLinkResponse",
]
