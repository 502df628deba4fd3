"""Profile Pydantic schemas."""

from pydantic import BaseModel, ConfigDict

from linkfolio.schemas.link import PublicLinkResponse


class PublicProfileResponse(BaseModel):
    """Display fields of a profile shown on its public page."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    display_name: str | None
    bio: str | None
    avatar_url: str | None


class PublicPageResponse(BaseModel):
    """Schema for the public profile page: profile plus its active links."""

    profile: PublicProfileResponse
    links: list[PublicLinkResponse]
