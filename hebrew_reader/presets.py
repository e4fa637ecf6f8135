"""
Hebrew Reader Backend — Styling Presets
=======================================

What:  Static table of display presets, keyed by the `stylingPreset` setting.
How:   Each preset names CSS classes the reader applies to words, syllables
       and letters. Unknown or missing ids resolve to the default preset, so
       a stale setting never breaks rendering.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

DEFAULT_PRESET_ID = "default"


@dataclass(frozen=True)
class StylingPreset:
    id: str
    display_name: str
    word_classes: str = ""
    syllable_classes: str = ""
    letter_classes: str = ""


PRESETS: Dict[str, StylingPreset] = {
    DEFAULT_PRESET_ID: StylingPreset(
        id=DEFAULT_PRESET_ID,
        display_name="ברירת מחדל",
    ),
    "neon-border": StylingPreset(
        id="neon-border",
        display_name="מסגרת נאון",
        word_classes="text-style-neon-border-word",
    ),
}


def get_preset(preset_id: Optional[str] = None) -> StylingPreset:
    if preset_id and preset_id in PRESETS:
        return PRESETS[preset_id]
    return PRESETS[DEFAULT_PRESET_ID]


def get_all_presets() -> List[StylingPreset]:
    return list(PRESETS.values())


def get_preset_ids() -> List[str]:
    return list(PRESETS)
