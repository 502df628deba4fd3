"""Security utilities for verifying identity provider JWTs."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from pydantic import BaseModel

from linkfolio.core.config import get_settings

settings = get_settings()


class TokenData(BaseModel):
    """Claims read from a verified token."""

    user_id: UUID
    email: str | None = None
    exp: datetime


def create_access_token(
    user_id: UUID,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token.

    Tokens are normally issued by the identity provider; this is used by
    tests and local development.

    Args:
        user_id: The user's UUID
        email: Optional email claim
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "exp": expire,
    }
    if email is not None:
        to_encode["email"] = email

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenData | None:
    """Decode and validate a JWT access token.

    Args:
        token: The JWT token string

    Returns:
        TokenData if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
        user_id = payload.get("sub")
        exp = payload.get("exp")

        if user_id is None or exp is None:
            return None

        return TokenData(
            user_id=UUID(user_id),
            email=payload.get("email"),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except (JWTError, ValueError):
        return None
