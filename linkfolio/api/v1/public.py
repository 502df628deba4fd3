"""Public profile page endpoint (no authentication)."""

import structlog
from fastapi import APIRouter, Request

from linkfolio.core.database import AsyncSessionDep
from linkfolio.core.exceptions import NotFoundError
from linkfolio.core.observability import record_public_view
from linkfolio.core.rate_limit import RATE_LIMIT_PUBLIC, limiter
from linkfolio.schemas.link import PublicLinkResponse
from linkfolio.schemas.profile import PublicPageResponse, PublicProfileResponse
from linkfolio.services import link_service

logger = structlog.get_logger()

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/{username}", response_model=PublicPageResponse)
@limiter.limit(RATE_LIMIT_PUBLIC)
async def get_public_page(
    request: Request,
    username: str,
    session: AsyncSessionDep,
) -> PublicPageResponse:
    """Get a profile's display fields and its active links in order.

    Inactive links are never included.
    """
    try:
        profile, links = await link_service.list_public_links(session, username)
    except NotFoundError:
        logger.info("Public page not found", username=username)
        record_public_view("not_found")
        raise

    record_public_view("found")
    return PublicPageResponse(
        profile=PublicProfileResponse.model_validate(profile),
        links=[PublicLinkResponse.model_validate(link) for link in links],
    )
