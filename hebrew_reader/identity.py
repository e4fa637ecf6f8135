"""
Hebrew Reader Backend — Anonymous Identity Cookie
=================================================

What:  Issues and reads the `user_id` cookie that identifies anonymous users.
How:   Ids have the form `user_<epoch-ms>_<random>`. The cookie lives for a
       year on path "/", SameSite=Lax, HttpOnly.

The settings owner is the account id for signed-in users and the cookie id
for everyone else; see `settings_owner_id()`.
"""

import secrets
import string
import time
from typing import Optional

from starlette.requests import Request
from starlette.responses import Response

from hebrew_reader.auth import AuthenticatedUser
from hebrew_reader.config import settings

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_user_id() -> str:
    random_part = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"user_{int(time.time() * 1000)}_{random_part}"


def get_cookie_user_id(request: Request) -> Optional[str]:
    return request.cookies.get(settings.user_id_cookie_name) or None


def set_user_id_cookie(response: Response, user_id: str) -> None:
    response.set_cookie(
        key=settings.user_id_cookie_name,
        value=user_id,
        max_age=settings.user_id_cookie_max_age,
        path="/",
        samesite="lax",
        httponly=True,
        secure=settings.user_id_cookie_secure,
    )


def settings_owner_id(cookie_user_id: str, user: Optional[AuthenticatedUser]) -> str:
    return str(user.id) if user is not None else cookie_user_id
