"""Link service: ordered link collections with contiguous positions.

Every owner's links carry positions 0..n-1 with no gaps or duplicates.
Functions here flush but never commit; the caller's transaction makes each
multi-row change (reorder, delete + compaction, moving a link) all-or-nothing.
"""

import functools
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any, ParamSpec, TypeVar
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from linkfolio.core.config import get_settings
from linkfolio.core.exceptions import (
    AuthError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from linkfolio.models.link import Link
from linkfolio.models.profile import Profile, utcnow
from linkfolio.schemas.link import (
    LinkCreate,
    LinkUpdate,
    validate_icon,
    validate_title,
    validate_url,
)
from linkfolio.services import profile as profile_service

settings = get_settings()
logger = structlog.get_logger()

P = ParamSpec("P")
T = TypeVar("T")

# Fields an update may not set to null
NON_NULLABLE_FIELDS = ("title", "url", "is_active", "position")


def translate_store_errors(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Turn database failures into ConflictError / StoreError."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except StaleDataError as e:
            logger.warning("Concurrent link modification", operation=func.__name__)
            raise ConflictError() from e
        except SQLAlchemyError as e:
            logger.warning("Link store failure", operation=func.__name__, error=str(e))
            raise StoreError() from e

    return wrapper


def require_owner(owner_id: UUID | None) -> UUID:
    """Return the owner id, or raise AuthError when there is no identity."""
    if owner_id is None:
        raise AuthError()
    return owner_id


def is_contiguous(positions: Iterable[int]) -> bool:
    """Check that positions are exactly 0..n-1."""
    ordered = sorted(positions)
    return ordered == list(range(len(ordered)))


def _checked(validator: Callable[[Any], T], value: Any, field: str) -> T:
    try:
        return validator(value)
    except ValueError as e:
        raise ValidationError(str(e), field=field) from e


def _apply_order(links: Sequence[Link]) -> int:
    """Renumber links to their index; return how many rows changed.

    Rows already in place are left alone so their version does not move.
    """
    changed = 0
    for index, link in enumerate(links):
        if link.position != index:
            link.position = index
            changed += 1
    return changed


async def _lock_owner(session: AsyncSession, owner_id: UUID) -> Profile:
    """Lock the owner's profile row before changing their collection.

    The profile row is the per-owner mutex: it exists even when the owner
    has no links, so two creates on an empty collection still queue up.
    Raises NotFoundError when the identity has no profile.
    """
    result = await session.execute(
        select(Profile).where(Profile.id == owner_id).with_for_update()
    )
    profile = result.scalar_one_or_none()
    if profile is None:
        logger.info("Write without profile rejected", owner_id=str(owner_id))
        raise NotFoundError("Profile not found")
    return profile


async def _owned_links(
    session: AsyncSession,
    owner_id: UUID,
    lock: bool = False,
) -> list[Link]:
    """Load all of an owner's links in position order.

    With lock=True the rows are selected FOR UPDATE and objects already in
    the session are refreshed from them. Callers take _lock_owner first.
    """
    query = (
        select(Link)
        .where(Link.user_id == owner_id)
        .order_by(Link.position, Link.created_at)
    )
    if lock:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(query)
    return list(result.scalars().all())


@translate_store_errors
async def get_link(
    session: AsyncSession,
    owner_id: UUID | None,
    link_id: UUID,
) -> Link:
    """Get one of the owner's links.

    Raises NotFoundError if the link does not exist or belongs to someone
    else; the two cases are indistinguishable to the caller.
    """
    owner_id = require_owner(owner_id)
    result = await session.execute(
        select(Link).where(Link.id == link_id, Link.user_id == owner_id)
    )
    link = result.scalar_one_or_none()
    if link is None:
        raise NotFoundError("Link not found")
    return link


@translate_store_errors
async def list_links(session: AsyncSession, owner_id: UUID | None) -> list[Link]:
    """Get all of the owner's links, active or not, in position order."""
    owner_id = require_owner(owner_id)
    links = await _owned_links(session, owner_id)
    if not is_contiguous(link.position for link in links):
        logger.warning(
            "Link positions not contiguous",
            owner_id=str(owner_id),
            positions=[link.position for link in links],
        )
    return links


@translate_store_errors
async def list_public_links(
    session: AsyncSession,
    username: str,
) -> tuple[Profile, list[Link]]:
    """Resolve a username and return its profile with active links only.

    This is the one read path without an ownership check.
    """
    profile = await profile_service.get_profile_by_username(session, username)
    if profile is None:
        raise NotFoundError("Profile not found")

    result = await session.execute(
        select(Link)
        .where(
            Link.user_id == profile.id,
            Link.is_active == True,  # noqa: E712
        )
        .order_by(Link.position, Link.created_at)
    )
    return profile, list(result.scalars().all())


@translate_store_errors
async def create_link(
    session: AsyncSession,
    owner_id: UUID | None,
    link_data: LinkCreate,
) -> Link:
    """Append a new link at the end of the owner's collection."""
    owner_id = require_owner(owner_id)
    title = _checked(validate_title, link_data.title, "title")
    url = _checked(validate_url, link_data.url, "url")
    icon = _checked(validate_icon, link_data.icon, "icon")

    await _lock_owner(session, owner_id)
    existing = await _owned_links(session, owner_id, lock=True)
    if len(existing) >= settings.max_links_per_user:
        raise ValidationError(
            f"A profile can have at most {settings.max_links_per_user} links",
        )

    link = Link(
        user_id=owner_id,
        title=title,
        url=url,
        icon=icon,
        is_active=link_data.is_active,
        link_metadata=link_data.metadata,
        position=max((item.position for item in existing), default=-1) + 1,
    )
    session.add(link)
    await session.flush()
    return link


@translate_store_errors
async def update_link(
    session: AsyncSession,
    owner_id: UUID | None,
    link_id: UUID,
    link_data: LinkUpdate,
) -> Link:
    """Update a link's fields.

    A new position moves the link within the sequence; the links in between
    shift by one so positions stay contiguous.
    """
    link = await get_link(session, owner_id, link_id)
    update_data = link_data.model_dump(exclude_unset=True)

    for field in NON_NULLABLE_FIELDS:
        if field in update_data and update_data[field] is None:
            raise ValidationError(f"{field} cannot be null", field=field)
    for field, validator in (
        ("title", validate_title),
        ("url", validate_url),
        ("icon", validate_icon),
    ):
        if field in update_data:
            update_data[field] = _checked(validator, update_data[field], field)

    new_order: list[Link] | None = None
    new_position = update_data.pop("position", None)
    if new_position is not None:
        await _lock_owner(session, link.user_id)
        links = await _owned_links(session, link.user_id, lock=True)
        if new_position >= len(links):
            raise ValidationError(
                f"Position must be between 0 and {len(links) - 1}",
                field="position",
            )
        new_order = [item for item in links if item.id != link.id]
        new_order.insert(new_position, link)

    if "metadata" in update_data:
        update_data["link_metadata"] = update_data.pop("metadata")
    for field, value in update_data.items():
        setattr(link, field, value)
    if new_order is not None:
        _apply_order(new_order)
    link.updated_at = utcnow()

    await session.flush()
    return link


@translate_store_errors
async def toggle_link_active(
    session: AsyncSession,
    owner_id: UUID | None,
    link_id: UUID,
) -> Link:
    """Flip whether a link is shown on the public page."""
    link = await get_link(session, owner_id, link_id)
    link.is_active = not link.is_active
    await session.flush()
    return link


@translate_store_errors
async def delete_link(
    session: AsyncSession,
    owner_id: UUID | None,
    link_id: UUID,
) -> None:
    """Permanently delete a link and close the gap it leaves."""
    owner_id = require_owner(owner_id)
    await _lock_owner(session, owner_id)
    links = await _owned_links(session, owner_id, lock=True)
    link = next((item for item in links if item.id == link_id), None)
    if link is None:
        raise NotFoundError("Link not found")

    await session.delete(link)
    await session.flush()

    remaining = [item for item in links if item.id != link_id]
    if _apply_order(remaining):
        await session.flush()


@translate_store_errors
async def reorder_links(
    session: AsyncSession,
    owner_id: UUID | None,
    ordered_ids: Sequence[UUID],
    expected_versions: dict[UUID, int] | None = None,
) -> list[Link]:
    """Set every link's position to its index in ordered_ids.

    ordered_ids must hold each of the owner's link ids exactly once; any
    mismatch raises ValidationError before anything is written. When
    expected_versions is given, a link whose version differs (it changed
    since the caller read it) raises ConflictError. Re-applying an order
    that is already in place writes nothing.

    Returns:
        The owner's links in their new order.
    """
    owner_id = require_owner(owner_id)
    ids = list(ordered_ids)
    await _lock_owner(session, owner_id)
    links = await _owned_links(session, owner_id, lock=True)
    by_id = {link.id: link for link in links}

    if len(set(ids)) != len(ids):
        raise ValidationError("Link ids must not contain duplicates", field="link_ids")
    if set(ids) != by_id.keys():
        raise ValidationError(
            "Link ids must list every one of your links exactly once",
            field="link_ids",
        )

    if expected_versions is not None:
        stale = [
            link_id
            for link_id, version in expected_versions.items()
            if link_id not in by_id or by_id[link_id].version != version
        ]
        if stale:
            logger.info(
                "Reorder rejected, stale versions",
                owner_id=str(owner_id),
                stale_ids=[str(link_id) for link_id in stale],
            )
            raise ConflictError()

    ordered = [by_id[link_id] for link_id in ids]
    if _apply_order(ordered):
        await session.flush()
    return ordered
