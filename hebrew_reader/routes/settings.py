"""
Hebrew Reader Backend — Settings Route Handlers
===============================================

What:  GET/PUT /api/settings and GET/PUT /api/preferences.
How:   Resolves the caller's identity (account or anonymous cookie),
       delegates to SettingsService / PreferencesService, and manages the
       `user_id` cookie.

Cookie rules:
    GET sets the cookie only when the request did not carry one, so an
    anonymous visitor receives exactly one id for the cookie's lifetime.
    PUT always (re)sets it, which also refreshes the one-year max-age.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hebrew_reader.auth import AuthenticatedUser, get_current_user, require_user
from hebrew_reader.database import get_db_session
from hebrew_reader.exceptions import IdentityError, ValidationError
from hebrew_reader.identity import (
    generate_user_id,
    get_cookie_user_id,
    set_user_id_cookie,
    settings_owner_id,
)
from hebrew_reader.routes.common import INVALID_BODY_MESSAGE, read_settings_patch
from hebrew_reader.schemas.common import ErrorResponse
from hebrew_reader.schemas.settings import AppSettings, SettingsSaveResponse, UserPreferences
from hebrew_reader.services.preferences_service import preferences_service
from hebrew_reader.services.settings_service import settings_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Settings"])


@router.get(
    "/settings",
    response_model=AppSettings,
    responses={
        200: {"description": "Effective settings for the caller"},
        500: {"description": "Settings could not be read", "model": ErrorResponse},
    },
    summary="Get the caller's effective settings",
)
async def get_settings(
    request: Request,
    response: Response,
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> AppSettings:
    """
    Stored settings with app defaults and built-in defaults filled in.
    For signed-in users a saved wordSpacing preference wins.
    """
    cookie_user_id = get_cookie_user_id(request)
    user_id = cookie_user_id or generate_user_id()
    if not user_id:
        raise IdentityError()

    result = await settings_service.load_settings(db, settings_owner_id(user_id, user), user)

    if cookie_user_id is None:
        set_user_id_cookie(response, user_id)
    return result


@router.put(
    "/settings",
    response_model=SettingsSaveResponse,
    responses={
        200: {"description": "Saved; full effective settings returned"},
        400: {"description": "Body is not a settings object", "model": ErrorResponse},
        500: {"description": "Settings could not be saved", "model": ErrorResponse},
    },
    summary="Save a partial settings update",
)
async def put_settings(
    request: Request,
    response: Response,
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SettingsSaveResponse:
    """
    Merge the body into the caller's stored settings.

    Fields missing from the body keep their stored values; the response is
    the complete effective settings after the write.
    """
    values = await read_settings_patch(request)

    user_id = get_cookie_user_id(request) or generate_user_id()
    if not user_id:
        raise IdentityError()

    saved = await settings_service.update_settings(
        db, settings_owner_id(user_id, user), values, user
    )

    set_user_id_cookie(response, user_id)
    return SettingsSaveResponse(success=True, settings=saved)


# ── Preferences (signed-in users only) ─────────────────────────────────────


@router.get(
    "/preferences",
    response_model=Dict[str, Any],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="Get the signed-in user's preferences",
)
async def get_preferences(
    user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    return await preferences_service.get_preferences(db, user.id)


@router.put(
    "/preferences",
    response_model=Dict[str, Any],
    responses={
        400: {"description": "Invalid body", "model": ErrorResponse},
        401: {"description": "Not signed in", "model": ErrorResponse},
    },
    summary="Update the signed-in user's preferences",
)
async def put_preferences(
    body: UserPreferences,
    user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    updates = body.model_dump(by_alias=True, exclude_none=True)
    if not updates:
        raise ValidationError(message=INVALID_BODY_MESSAGE)
    await preferences_service.save_preferences(db, user.id, updates, email=user.email)
    return await preferences_service.get_preferences(db, user.id)
