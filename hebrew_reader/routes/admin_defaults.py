"""
Hebrew Reader Backend — Admin Defaults Route Handlers
=====================================================

What:  GET/PUT /api/admin/defaults.
How:   The admin capability is injected per handler:
         GET → get_admin_capability (branches on is_admin)
         PUT → require_admin        (403 before the body is even read)

Response shapes (GET):
    admin     → every defaultable field, stored value or built-in default
    non-admin → only the values stored by an admin (read-only fallback view)
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hebrew_reader.auth import AdminCapability, get_admin_capability, require_admin
from hebrew_reader.database import get_db_session
from hebrew_reader.routes.common import read_settings_patch
from hebrew_reader.schemas.common import ErrorResponse
from hebrew_reader.schemas.settings import DefaultsSaveResponse
from hebrew_reader.services.defaults_service import app_defaults_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get(
    "/defaults",
    response_model=Dict[str, Any],
    responses={
        200: {"description": "Defaults; full set for admins, stored overrides otherwise"},
        500: {"description": "Defaults could not be read", "model": ErrorResponse},
    },
    summary="Get app defaults",
)
async def get_defaults(
    capability: AdminCapability = Depends(get_admin_capability),
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    if capability.is_admin:
        return await app_defaults_service.get_admin_view(db)
    return await app_defaults_service.get_public_view(db)


@router.put(
    "/defaults",
    response_model=DefaultsSaveResponse,
    responses={
        200: {"description": "Saved; full default set returned"},
        400: {"description": "Body is not a settings object", "model": ErrorResponse},
        403: {"description": "Caller is not an admin", "model": ErrorResponse},
        500: {"description": "Defaults could not be saved", "model": ErrorResponse},
    },
    summary="Save app defaults (admins only)",
)
async def put_defaults(
    request: Request,
    capability: AdminCapability = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> DefaultsSaveResponse:
    values = await read_settings_patch(request)
    await app_defaults_service.save_defaults(db, values)
    logger.info("App defaults updated by %s", capability.user.id if capability.user else "?")
    return DefaultsSaveResponse(success=True, defaults=await app_defaults_service.get_admin_view(db))
