"""
Hebrew Reader Backend — Text Analysis Route Handlers
====================================================

What:  POST /api/niqqud, /api/syllables, /api/morphology.
How:   Loads the caller's effective settings (models, prompts, keys), builds
       the per-service config from them and delegates to the service.
       Errors are raised, not returned:
         ValidationError → 400 (empty text, missing key/model/prompt)
         LLMServiceError → 503 (provider failure, unusable answer)

Identity follows the settings routes: account id when signed in, otherwise
the `user_id` cookie. A caller with no cookie gets built-in defaults only.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hebrew_reader.auth import AuthenticatedUser, get_current_user
from hebrew_reader.database import get_db_session
from hebrew_reader.identity import get_cookie_user_id, settings_owner_id
from hebrew_reader.schemas.analysis import (
    MorphologyServiceResponse,
    NiqqudResponse,
    SyllablesResponse,
    TextRequest,
)
from hebrew_reader.schemas.common import ErrorResponse
from hebrew_reader.schemas.settings import AppSettings
from hebrew_reader.services.morphology_service import MorphologyConfig, morphology_service
from hebrew_reader.services.niqqud_service import NiqqudConfig, niqqud_service
from hebrew_reader.services.settings_service import settings_service
from hebrew_reader.services.syllables_service import SyllablesConfig, syllables_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Analysis"])

ERROR_RESPONSES = {
    400: {"description": "Missing text, model, key or prompt", "model": ErrorResponse},
    503: {"description": "Language model call failed", "model": ErrorResponse},
}


async def get_effective_settings(
    request: Request,
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> AppSettings:
    owner_id = settings_owner_id(get_cookie_user_id(request) or "", user)
    return await settings_service.load_settings(db, owner_id, user)


@router.post(
    "/niqqud",
    response_model=NiqqudResponse,
    responses=ERROR_RESPONSES,
    summary="Add niqqud to Hebrew text",
)
async def add_niqqud(
    body: TextRequest,
    settings: AppSettings = Depends(get_effective_settings),
) -> NiqqudResponse:
    return await niqqud_service.add_niqqud(body.text, NiqqudConfig.from_settings(settings))


@router.post(
    "/syllables",
    response_model=SyllablesResponse,
    responses=ERROR_RESPONSES,
    summary="Split Hebrew text into syllables",
)
async def divide_syllables(
    body: TextRequest,
    settings: AppSettings = Depends(get_effective_settings),
) -> SyllablesResponse:
    return await syllables_service.divide(body.text, SyllablesConfig.from_settings(settings))


@router.post(
    "/morphology",
    response_model=MorphologyServiceResponse,
    responses=ERROR_RESPONSES,
    summary="Morphological analysis of vocalized Hebrew text",
)
async def analyze_morphology(
    body: TextRequest,
    settings: AppSettings = Depends(get_effective_settings),
) -> MorphologyServiceResponse:
    return await morphology_service.analyze(body.text, MorphologyConfig.from_settings(settings))
