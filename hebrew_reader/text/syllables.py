"""
Parsing of syllable-division output from a language model.

Expected format is one word per line, syllables separated by hyphens,
optionally wrapped in a markdown code block:

    דַּ-נִי
    קָם
    בַּ-בֹּו-קֶר
"""

import re
from typing import List, Optional

from hebrew_reader.schemas.analysis import SyllableWord
from hebrew_reader.text.niqqud import remove_niqqud

_CODE_BLOCK_RE = re.compile(r"```(?:[a-z]+)?\s*([\s\S]*?)```")
_LINE_SPLIT_RE = re.compile(r"\r?\n")


def parse_syllables_response(response: Optional[str]) -> Optional[List[SyllableWord]]:
    """
    Parse model output into words and syllables.

    Returns None when nothing usable was found, so callers can tell an empty
    answer apart from a parsed one.
    """
    if not response or not response.strip():
        return None

    text = response.strip()
    block = _CODE_BLOCK_RE.search(text)
    if block:
        text = block.group(1).strip()

    lines = [line.strip() for line in _LINE_SPLIT_RE.split(text)]
    words: List[SyllableWord] = []
    for line in lines:
        if not line:
            continue
        syllables = [part.strip() for part in line.split("-") if part.strip()]
        if not syllables:
            continue
        word = (
            remove_niqqud("".join(syllables))
            or remove_niqqud(syllables[0])
            or line.replace("-", "")
        )
        words.append(SyllableWord(word=word, syllables=syllables))

    return words or None
