"""Link CRUD and reorder endpoints for the authenticated owner."""

from uuid import UUID

import structlog
from fastapi import APIRouter, Request, status

from linkfolio.core.database import AsyncSessionDep
from linkfolio.core.deps import CurrentOwnerId
from linkfolio.core.observability import bind_link_context, record_link_operation
from linkfolio.core.rate_limit import RATE_LIMIT_API, RATE_LIMIT_CREATE_LINK, limiter
from linkfolio.schemas.link import (
    LinkCreate,
    LinkListResponse,
    LinkReorder,
    LinkResponse,
    LinkUpdate,
)
from linkfolio.services import link_service

logger = structlog.get_logger()

router = APIRouter(prefix="/links", tags=["links"])


@router.post("", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_CREATE_LINK)
async def create_link(
    request: Request,
    link_data: LinkCreate,
    owner_id: CurrentOwnerId,
    session: AsyncSessionDep,
) -> LinkResponse:
    """Add a link at the end of the current user's collection."""
    bind_link_context(owner_id)
    link = await link_service.create_link(
        session=session,
        owner_id=owner_id,
        link_data=link_data,
    )
    await session.commit()
    logger.info(
        "Link created",
        link_id=str(link.id),
        position=link.position,
    )
    record_link_operation("create")
    return LinkResponse.model_validate(link)


@router.get("", response_model=LinkListResponse)
@limiter.limit(RATE_LIMIT_API)
async def list_links(
    request: Request,
    owner_id: CurrentOwnerId,
    session: AsyncSessionDep,
) -> LinkListResponse:
    """List all of the current user's links (active and inactive) in order."""
    bind_link_context(owner_id)
    links = await link_service.list_links(session=session, owner_id=owner_id)
    return LinkListResponse(
        items=[LinkResponse.model_validate(link) for link in links],
        total=len(links),
    )


@router.put("/order", response_model=LinkListResponse)
@limiter.limit(RATE_LIMIT_API)
async def reorder_links(
    request: Request,
    reorder: LinkReorder,
    owner_id: CurrentOwnerId,
    session: AsyncSessionDep,
) -> LinkListResponse:
    """Replace the order of the whole collection.

    `link_ids` must contain every link of the current user exactly once.
    Send `expected_versions` (from the last list) to get a 409 instead of
    overwriting an order changed elsewhere in the meantime.
    """
    bind_link_context(owner_id)
    links = await link_service.reorder_links(
        session=session,
        owner_id=owner_id,
        ordered_ids=reorder.link_ids,
        expected_versions=reorder.expected_versions,
    )
    await session.commit()
    logger.info("Links reordered", count=len(links))
    record_link_operation("reorder")
    return LinkListResponse(
        items=[LinkResponse.model_validate(link) for link in links],
        total=len(links),
    )


@router.get("/{link_id}", response_model=LinkResponse)
@limiter.limit(RATE_LIMIT_API)
async def get_link(
    request: Request,
    link_id: UUID,
    owner_id: CurrentOwnerId,
    session: AsyncSessionDep,
) -> LinkResponse:
    """Get a specific link by ID."""
    bind_link_context(owner_id, link_id)
    link = await link_service.get_link(
        session=session,
        owner_id=owner_id,
        link_id=link_id,
    )
    return LinkResponse.model_validate(link)


@router.patch("/{link_id}", response_model=LinkResponse)
@limiter.limit(RATE_LIMIT_API)
async def update_link(
    request: Request,
    link_id: UUID,
    link_data: LinkUpdate,
    owner_id: CurrentOwnerId,
    session: AsyncSessionDep,
) -> LinkResponse:
    """Update a link's properties."""
    bind_link_context(owner_id, link_id)
    link = await link_service.update_link(
        session=session,
        owner_id=owner_id,
        link_id=link_id,
        link_data=link_data,
    )
    await session.commit()

    logger.info("Link updated", fields=sorted(link_data.model_fields_set))
    record_link_operation("update")
    return LinkResponse.model_validate(link)


@router.post("/{link_id}/toggle", response_model=LinkResponse)
@limiter.limit(RATE_LIMIT_API)
async def toggle_link(
    request: Request,
    link_id: UUID,
    owner_id: CurrentOwnerId,
    session: AsyncSessionDep,
) -> LinkResponse:
    """Show or hide a link on the public profile page."""
    bind_link_context(owner_id, link_id)
    link = await link_service.toggle_link_active(
        session=session,
        owner_id=owner_id,
        link_id=link_id,
    )
    await session.commit()

    logger.info("Link toggled", is_active=link.is_active)
    record_link_operation("toggle")
    return LinkResponse.model_validate(link)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(RATE_LIMIT_API)
async def delete_link(
    request: Request,
    link_id: UUID,
    owner_id: CurrentOwnerId,
    session: AsyncSessionDep,
) -> None:
    """Permanently delete a link; later links move up one position."""
    bind_link_context(owner_id, link_id)
    await link_service.delete_link(
        session=session,
        owner_id=owner_id,
        link_id=link_id,
    )
    await session.commit()

    logger.info("Link deleted")
    record_link_operation("delete")
