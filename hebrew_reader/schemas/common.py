"""
Hebrew Reader Backend — Shared Pydantic Schemas
===============================================

What:  Base model and response shapes shared by every route module.
How:   `CamelModel` gives snake_case attributes in Python and camelCase
       names on the wire, which is the casing the web client sends and reads.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase in JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Example:
        {
            "error": "Failed to save settings",
            "code": "server_error",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    llm_providers: Dict[str, str] = Field(
        description="Per-provider key status: configured, not_configured"
    )
    uptime_seconds: float = Field(description="Seconds since service started")
