"""
Hebrew Reader Backend — Settings Schemas
========================================

What:  The settings record as seen by clients, plus the partial-update body.
Who:   Used by the settings and admin defaults routes and by the resolver.

`AppSettings` doubles as the table of built-in defaults: instantiating it
with no arguments yields every hardcoded fallback value.

`SettingsPatch` mirrors `AppSettings` with every field optional. Only the
fields a client actually sent survive `model_dump(exclude_unset=True)`.
Unknown keys are ignored rather than persisted.
"""

from typing import Any, Dict, Optional

from pydantic import ConfigDict, Field, create_model
from pydantic.alias_generators import to_camel

from hebrew_reader.schemas.common import CamelModel


class AppSettings(CamelModel):
    """Fully populated settings as returned by GET/PUT /api/settings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    # ── Niqqud ────────────────────────────────────────────────────────────
    niqqud_api_key: str = ""
    niqqud_model: str = ""
    niqqud_prompt: str = ""
    niqqud_system_prompt: str = ""
    niqqud_user_prompt: str = ""
    niqqud_temperature: float = 0.2
    niqqud_completion_system_prompt: str = ""
    niqqud_completion_user_prompt: str = ""

    # ── Syllables ─────────────────────────────────────────────────────────
    syllables_api_key: str = ""
    syllables_model: str = ""
    syllables_prompt: str = ""
    syllables_temperature: float = 0.2
    syllable_border_size: int = 2
    syllable_background_color: str = "#dbeafe"

    # ── Morphology ────────────────────────────────────────────────────────
    morphology_api_key: str = ""
    morphology_model: str = ""
    morphology_prompt: str = ""
    morphology_temperature: float = 0.2
    morphology_use_niqqud_key: bool = False

    # ── Display ───────────────────────────────────────────────────────────
    word_spacing: int = 12
    letter_spacing: int = 0
    font_size: int = 30
    word_highlight_padding: int = 4
    syllable_highlight_padding: int = 3
    letter_highlight_padding: int = 2
    word_highlight_color: str = "#fff176"
    syllable_highlight_color: str = "#fff176"
    letter_highlight_color: str = "#fff176"
    styling_preset: str = "default"


SettingsPatch = create_model(
    "SettingsPatch",
    __config__=ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    ),
    **{
        name: (Optional[field.annotation], None)
        for name, field in AppSettings.model_fields.items()
    },
)
SettingsPatch.__doc__ = "Partial settings body accepted by PUT endpoints."


class SettingsSaveResponse(CamelModel):
    """Body of a successful PUT /api/settings."""
    success: bool = True
    settings: AppSettings


class DefaultsSaveResponse(CamelModel):
    """Body of a successful PUT /api/admin/defaults (camelCase keys)."""
    success: bool = True
    defaults: Dict[str, Any] = Field(default_factory=dict)


class UserPreferences(CamelModel):
    """Authenticated-only preferences stored in profiles.preferences."""
    word_spacing: Optional[int] = None
