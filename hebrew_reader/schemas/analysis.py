"""
Hebrew Reader Backend — Text Analysis Schemas
=============================================

What:  Request and response shapes for niqqud, syllable and morphology calls.
Who:   Returned by the analysis routes and by the morphology client state.

Morphology words are kept as raw dicts (`data`) rather than typed models:
the model output is validated field-by-field by the morphology service, and
an invalid word is still returned to the client together with its errors.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from hebrew_reader.schemas.common import CamelModel


class TextRequest(CamelModel):
    """Body for every analysis endpoint."""
    text: str = Field(description="Hebrew text to analyze")


# ── Niqqud ────────────────────────────────────────────────────────────────


class NiqqudResponse(CamelModel):
    niqqud_text: str = Field(description="Fully vocalized text")
    mode: Literal["full", "completion"] = Field(
        description="'completion' when partially vocalized input was completed"
    )


# ── Syllables ─────────────────────────────────────────────────────────────


class SyllableWord(CamelModel):
    word: str
    syllables: List[str]


class SyllablesResponse(CamelModel):
    words: List[SyllableWord]
    raw_response: str


# ── Morphology ────────────────────────────────────────────────────────────


class MorphologyValidation(CamelModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)


class MorphologyResult(CamelModel):
    data: Dict[str, Any]
    validation: MorphologyValidation


class MorphologyServiceResponse(CamelModel):
    """
    Result object of a morphology analysis.

    success=False carries a Hebrew `error` and, when the model answered
    with unparseable output, the `raw_response` for display.
    """
    success: bool
    results: Optional[List[MorphologyResult]] = None
    raw_response: Optional[str] = None
    error: Optional[str] = None
