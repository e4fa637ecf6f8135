"""
Hebrew Reader Backend — Styling Preset Route Handler
====================================================

What:  GET /api/presets, the static preset table for the settings screen.
"""

from typing import List

from fastapi import APIRouter

from hebrew_reader.presets import get_all_presets
from hebrew_reader.schemas.common import CamelModel

router = APIRouter(prefix="/api", tags=["Presets"])


class PresetResponse(CamelModel):
    id: str
    display_name: str
    word_classes: str
    syllable_classes: str
    letter_classes: str


@router.get("/presets", response_model=List[PresetResponse], summary="List styling presets")
async def list_presets() -> List[PresetResponse]:
    return [
        PresetResponse(
            id=preset.id,
            display_name=preset.display_name,
            word_classes=preset.word_classes,
            syllable_classes=preset.syllable_classes,
            letter_classes=preset.letter_classes,
        )
        for preset in get_all_presets()
    ]
