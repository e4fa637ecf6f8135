"""
Hebrew Reader Backend — Shared Route Helpers
============================================

Settings bodies are parsed by hand rather than through a FastAPI body
parameter: body validation must produce a 400 with our error shape, and for
admin writes it must run only after the admin check has passed.
"""

from typing import Any, Dict

import pydantic
from starlette.requests import Request

from hebrew_reader.exceptions import ValidationError
from hebrew_reader.schemas.settings import SettingsPatch

INVALID_BODY_MESSAGE = "Invalid request body"


async def read_settings_patch(request: Request) -> Dict[str, Any]:
    """
    Parse the request body as a partial settings object.

    Returns:
        Field values keyed by snake_case name; unknown keys and nulls dropped.

    Raises:
        ValidationError: body is not JSON, not an object, or has a field of
            the wrong type.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise ValidationError(message=INVALID_BODY_MESSAGE, context={"reason": str(e)}) from e

    if not isinstance(payload, dict):
        raise ValidationError(
            message=INVALID_BODY_MESSAGE,
            context={"reason": f"expected object, got {type(payload).__name__}"},
        )

    try:
        patch = SettingsPatch.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(
            message=INVALID_BODY_MESSAGE,
            context={"errors": [err["loc"] for err in e.errors()]},
        ) from e

    return patch.model_dump(exclude_unset=True, exclude_none=True)
