"""
Hebrew Reader Backend — Saved Text Schemas
==========================================
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from hebrew_reader.schemas.common import CamelModel


class SavedTextRequest(CamelModel):
    original_text: str = Field(min_length=1, description="Text as the user typed it")
    niqqud_text: Optional[str] = Field(default=None, description="Vocalized form, if any")
    clean_text: Optional[str] = Field(
        default=None,
        description="Text without niqqud; derived from original_text when omitted",
    )


class SavedTextResponse(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: uuid.UUID
    original_text: str
    niqqud_text: Optional[str] = None
    clean_text: str
    last_accessed_at: datetime


class LastTextResponse(CamelModel):
    text: Optional[SavedTextResponse] = None
