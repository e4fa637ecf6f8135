"""
Hebrew Reader Backend — Saved Text Route Handlers
=================================================

What:  GET/PUT /api/saved-texts/last for signed-in users.
How:   `require_user` rejects anonymous callers with 401 before the
       service is reached.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hebrew_reader.auth import AuthenticatedUser, require_user
from hebrew_reader.database import get_db_session
from hebrew_reader.schemas.common import ErrorResponse
from hebrew_reader.schemas.saved_text import (
    LastTextResponse,
    SavedTextRequest,
    SavedTextResponse,
)
from hebrew_reader.services.saved_text_service import saved_text_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/saved-texts", tags=["Saved Texts"])


@router.get(
    "/last",
    response_model=LastTextResponse,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Get the last text the user worked on",
)
async def get_last_text(
    user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> LastTextResponse:
    record = await saved_text_service.get_last_text(db, user.id)
    if record is None:
        return LastTextResponse(text=None)
    return LastTextResponse(text=SavedTextResponse.model_validate(record))


@router.put(
    "/last",
    response_model=SavedTextResponse,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        422: {"description": "originalText missing or empty"},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Save the text the user is working on",
)
async def put_last_text(
    body: SavedTextRequest,
    user: AuthenticatedUser = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> SavedTextResponse:
    record = await saved_text_service.save_last_text(db, user.id, body, email=user.email)
    return SavedTextResponse.model_validate(record)
