"""Profile lookups used to resolve public pages."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from linkfolio.models.profile import Profile


async def get_profile_by_username(session: AsyncSession, username: str) -> Profile | None:
    """Get a profile by its public username."""
    result = await session.execute(
        select(Profile).where(Profile.username == username)
    )
    return result.scalar_one_or_none()
