"""
Hebrew niqqud (vowel mark) detection and removal.

Niqqud and cantillation marks occupy U+0591..U+05C7. Hebrew letters and
marks together occupy U+0590..U+05FF.
"""

import re
from enum import Enum

NIQQUD_START = 0x0591
NIQQUD_END = 0x05C7

_NIQQUD_RE = re.compile("[\u0591-\u05C7]")
_NON_HEBREW_RE = re.compile("[^\u0590-\u05FF]")

# Share of vocalized words at which text counts as fully vocalized
FULL_NIQQUD_RATIO = 0.8


class NiqqudStatus(str, Enum):
    NONE = "none"
    PARTIAL = "partial"
    FULL = "full"


def is_niqqud_mark(char: str) -> bool:
    return NIQQUD_START <= ord(char) <= NIQQUD_END


def remove_niqqud(text: str) -> str:
    """Strip every niqqud mark, leaving letters and punctuation intact."""
    return _NIQQUD_RE.sub("", text)


def detect_niqqud(text: str) -> NiqqudStatus:
    """
    Classify how much of `text` carries niqqud.

    Only whitespace-separated words containing Hebrew characters are counted.
    A word counts as vocalized if it has at least one mark.
    """
    if not text or not text.strip():
        return NiqqudStatus.NONE

    words = [_NON_HEBREW_RE.sub("", word) for word in text.split()]
    words = [word for word in words if word]
    if not words:
        return NiqqudStatus.NONE

    vocalized = sum(1 for word in words if any(is_niqqud_mark(ch) for ch in word))
    if vocalized == 0:
        return NiqqudStatus.NONE
    if vocalized / len(words) >= FULL_NIQQUD_RATIO:
        return NiqqudStatus.FULL
    return NiqqudStatus.PARTIAL


def has_niqqud(text: str) -> bool:
    return detect_niqqud(text) is not NiqqudStatus.NONE


def is_fully_niqqud(text: str) -> bool:
    return detect_niqqud(text) is NiqqudStatus.FULL
