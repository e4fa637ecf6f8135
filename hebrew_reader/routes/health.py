"""
Hebrew Reader Backend — Health Check Route
==========================================

What:  GET /health for container health checks and load balancers.
How:   Runs SELECT 1 against the database and reports which language-model
       providers have a server-side key. No provider is called.

Status levels:
    healthy:   database reachable and at least one provider key configured
    degraded:  database reachable, no server keys (users must bring their own)
    unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from hebrew_reader import __version__
from hebrew_reader.database import engine
from hebrew_reader.schemas.common import HealthResponse
from hebrew_reader.services.gemini_service import gemini_service
from hebrew_reader.services.openai_service import openai_service, openrouter_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        logger.warning("Health check: database unreachable: %s", str(e))

    providers = {
        "openai": openai_service,
        "openrouter": openrouter_service,
        "gemini": gemini_service,
    }
    llm_providers = {
        name: "configured" if provider.has_default_key() else "not_configured"
        for name, provider in providers.items()
    }

    if db_status != "connected":
        overall = "unhealthy"
    elif "configured" not in llm_providers.values():
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        llm_providers=llm_providers,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
