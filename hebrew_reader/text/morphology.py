"""
Validation and parsing helpers for morphology analysis output.

The model is asked for a JSON array of word objects:

    {
        "word": "הַיְלָדִים",
        "pos": "noun",
        "morphology_parts": [
            {"text": "הַ", "type": "prefix", "role": "definite_article"},
            {"text": "יְלָדִים", "type": "stem", "role": "stem"}
        ],
        "syllables": ["הַ", "יְ", "לָ", "דִים"],
        "binyan": null,
        "gizra": null,
        "confidence": 0.93,
        ...
    }

Validation never raises: every problem becomes a Hebrew message in the
returned error list so the UI can show it next to the word.
"""

import json
import re
from typing import Any, Dict, List

from hebrew_reader.schemas.analysis import MorphologyResult, MorphologyValidation

VALID_POS = frozenset({
    "noun", "verb", "adjective", "pronoun", "preposition",
    "adverb", "conjunction", "proper_noun", "particle", "numeral",
    "quantifier", "interrogative",
})

VALID_TYPES = frozenset({"prefix", "stem", "suffix"})

VALID_ROLES = frozenset({
    "conjunction", "definite_article", "preposition", "relativizer", "question",
    "stem", "plural", "dual", "possessive", "tense_person", "object_pronoun",
    "directional", "construct",
})

VALID_BINYANIM = frozenset({"paal", "nifal", "piel", "pual", "hifil", "hufal", "hitpael"})

VALID_GIZROT = frozenset({
    "shlemim", "ayin_vav", "ayin_yod", "peh_nun", "peh_yod",
    "lamed_heh", "lamed_alef", "kfulim", "peh_alef",
})

REQUIRED_FIELDS = ("word", "pos", "morphology_parts", "syllables", "confidence")

DEFAULT_MORPHOLOGY_PROMPT = """אתה מנתח מורפולוגי מומחה לעברית.
נתח כל מילה בטקסט המנוקד הבא והחזר מערך JSON בלבד, ללא הסברים.
לכל מילה החזר אובייקט עם השדות:
word, pos, morphology_parts (text, type, role), syllables, root, binyan, gizra,
tense, person, gender, number, construct_state, definiteness, frequency, level,
related_words, niqqud, confidence (0.0-1.0).
חיבור morphology_parts וחיבור syllables חייבים להיות זהים למילה.

הטקסט:
{text}"""

_FENCE_RE = re.compile(r"^```(?:json)?\s*")
_TRAILING_FENCE_RE = re.compile(r"```$")


def strip_code_fence(raw: str) -> str:
    """
    Remove a markdown ```json fence around a model answer.

    Unfenced text is returned unchanged apart from surrounding whitespace.
    """
    text = raw.strip()
    if text.startswith("```"):
        text = _FENCE_RE.sub("", text)
        text = _TRAILING_FENCE_RE.sub("", text).strip()
    return text


def parse_morphology_json(raw: str) -> List[Any]:
    """
    Parse a (possibly fenced) model answer into a list of word items.

    A single object is wrapped in a list. Raises ValueError (json's
    JSONDecodeError) when the text is not JSON.
    """
    parsed = json.loads(strip_code_fence(raw))
    return parsed if isinstance(parsed, list) else [parsed]


def build_morphology_prompt(text: str, template: str = "") -> str:
    return (template or DEFAULT_MORPHOLOGY_PROMPT).replace("{text}", text, 1)


def _is_one_of(value: Any, allowed: frozenset) -> bool:
    return isinstance(value, str) and value in allowed


def validate_morphology_word(item: Any) -> MorphologyValidation:
    """Check required fields, enum values, and that parts/syllables rebuild the word."""
    if not isinstance(item, dict):
        return MorphologyValidation(valid=False, errors=[f"שדה חסר: {f}" for f in REQUIRED_FIELDS])

    errors: List[str] = [f"שדה חסר: {field}" for field in REQUIRED_FIELDS if field not in item]
    if errors:
        return MorphologyValidation(valid=False, errors=errors)

    word = item["word"]

    if not _is_one_of(item["pos"], VALID_POS):
        errors.append(f"POS לא תקין: '{item['pos']}'")

    confidence = item["confidence"]
    if (
        isinstance(confidence, bool)
        or not isinstance(confidence, (int, float))
        or not 0 <= confidence <= 1
    ):
        errors.append(f"confidence חייב להיות 0.0-1.0, קיבלנו: {confidence}")

    parts = item["morphology_parts"]
    if isinstance(parts, list):
        for index, part in enumerate(parts):
            part = part if isinstance(part, dict) else {}
            if "text" not in part:
                errors.append(f"חלק {index} חסר 'text'")
            if "type" not in part:
                errors.append(f"חלק {index} חסר 'type'")
            elif not _is_one_of(part["type"], VALID_TYPES):
                errors.append(f"חלק {index} type לא תקין: '{part['type']}'")
            if "role" not in part:
                errors.append(f"חלק {index} חסר 'role'")
            elif not _is_one_of(part["role"], VALID_ROLES):
                errors.append(f"חלק {index} role לא תקין: '{part['role']}'")

        joined = "".join(
            str(part.get("text") or "") if isinstance(part, dict) else "" for part in parts
        )
        if joined != word:
            errors.append(f"שלמות morphology: '{joined}' ≠ '{word}'")

    syllables = item["syllables"]
    if isinstance(syllables, list):
        joined = "".join(str(s) for s in syllables)
        if joined != word:
            errors.append(f"שלמות syllables: '{joined}' ≠ '{word}'")

    binyan = item.get("binyan")
    if binyan and not _is_one_of(binyan, VALID_BINYANIM):
        errors.append(f"בניין לא תקין: '{binyan}'")

    gizra = item.get("gizra")
    if gizra and not _is_one_of(gizra, VALID_GIZROT):
        errors.append(f"גזרה לא תקינה: '{gizra}'")

    return MorphologyValidation(valid=not errors, errors=errors)


def to_results(items: List[Any]) -> List[MorphologyResult]:
    """Attach a validation result to every parsed item."""
    results = []
    for item in items:
        data: Dict[str, Any] = item if isinstance(item, dict) else {"value": item}
        results.append(MorphologyResult(data=data, validation=validate_morphology_word(item)))
    return results


def assume_valid(items: List[Any]) -> List[MorphologyResult]:
    """Wrap items restored from a cache without re-running validation."""
    return [
        MorphologyResult(
            data=item if isinstance(item, dict) else {"value": item},
            validation=MorphologyValidation(valid=True, errors=[]),
        )
        for item in items
    ]
