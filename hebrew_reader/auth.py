"""
Hebrew Reader Backend — Authentication & Authorization Dependencies
===================================================================

What:  FastAPI dependencies that identify the caller and gate admin access.
How:   Access tokens are HS256 JWTs issued by the identity provider and
       verified with PyJWT against AUTH_JWT_SECRET. The token is read from
       `Authorization: Bearer <jwt>` or, for browser requests, from the
       access-token cookie. The `sub` claim is the profile id.

       A missing, expired or malformed token means "anonymous". It is never
       an error on its own: endpoints that require an account raise
       AuthenticationError, and admin-only endpoints raise
       AuthorizationError.

Admin capability:
    `get_admin_capability` performs one boolean lookup of profiles.is_admin
    per request (no caching). Handlers receive the capability as an
    injected value instead of querying the flag themselves; `require_admin`
    turns it into a hard gate.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hebrew_reader.config import settings
from hebrew_reader.database import get_db_session
from hebrew_reader.exceptions import AuthenticationError, AuthorizationError
from hebrew_reader.models.profile import Profile

logger = logging.getLogger(__name__)

ADMIN_REQUIRED_MESSAGE = "Unauthorized: Only admins can save app defaults"


@dataclass(frozen=True)
class AuthenticatedUser:
    id: uuid.UUID
    email: Optional[str] = None


@dataclass(frozen=True)
class AdminCapability:
    """Result of the per-request admin check."""
    user: Optional[AuthenticatedUser]
    is_admin: bool


def decode_access_token(token: str) -> Optional[AuthenticatedUser]:
    """Verify a JWT and return its user, or None when it is not acceptable."""
    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience or None,
            options={"require": ["sub", "exp"]},
        )
        return AuthenticatedUser(id=uuid.UUID(str(claims["sub"])), email=claims.get("email"))
    except (jwt.InvalidTokenError, ValueError) as e:
        logger.debug("Rejected access token: %s", str(e))
        return None


def _extract_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.auth_cookie_name) or None


async def get_current_user(request: Request) -> Optional[AuthenticatedUser]:
    """The signed-in user, or None for anonymous requests."""
    token = _extract_token(request)
    return decode_access_token(token) if token else None


async def require_user(
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
) -> AuthenticatedUser:
    if user is None:
        raise AuthenticationError()
    return user


async def get_admin_capability(
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> AdminCapability:
    """
    Look up `profiles.is_admin` for the caller.

    Anonymous callers and lookup failures both yield is_admin=False.
    """
    if user is None:
        return AdminCapability(user=None, is_admin=False)
    try:
        result = await db.execute(select(Profile.is_admin).where(Profile.id == user.id))
        is_admin = result.scalar_one_or_none() is True
    except Exception as e:
        logger.warning("Admin lookup failed for %s: %s", user.id, str(e))
        is_admin = False
    return AdminCapability(user=user, is_admin=is_admin)


async def require_admin(
    capability: AdminCapability = Depends(get_admin_capability),
) -> AdminCapability:
    if not capability.is_admin:
        raise AuthorizationError(
            message=ADMIN_REQUIRED_MESSAGE,
            context={"user_id": str(capability.user.id) if capability.user else None},
        )
    return capability
