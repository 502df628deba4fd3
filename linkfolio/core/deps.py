"""Dependency injection utilities for FastAPI routes."""

from typing import Annotated
from uuid import UUID

from fastapi import Cookie, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from linkfolio.core.exceptions import AuthError
from linkfolio.core.security import decode_access_token

# Cookie name for auth token
AUTH_COOKIE_NAME = "linkfolio_token"

bearer_scheme = HTTPBearer(auto_error=False)


async def get_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    linkfolio_token: Annotated[str | None, Cookie()] = None,
) -> str | None:
    """Extract the auth token from the Bearer header or the httpOnly cookie."""
    if credentials is not None:
        return credentials.credentials
    return linkfolio_token


async def get_current_user_id(
    token: Annotated[str | None, Depends(get_token)],
) -> UUID | None:
    """Return the authenticated user's id, or None.

    The token is verified locally; no database lookup is needed because
    the identity provider's user id is the owner id of links.
    """
    if token is None:
        return None

    token_data = decode_access_token(token)
    if token_data is None:
        return None
    return token_data.user_id


async def require_current_user_id(
    user_id: Annotated[UUID | None, Depends(get_current_user_id)],
) -> UUID:
    """Get current authenticated user id.

    Raises AuthError (401) if not authenticated.
    Use this for protected routes.
    """
    if user_id is None:
        raise AuthError()
    return user_id


# Type alias for dependency injection
CurrentOwnerId = Annotated[UUID, Depends(require_current_user_id)]
