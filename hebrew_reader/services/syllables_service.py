"""
Hebrew Reader Backend — Syllables Service
=========================================

What:  Splits Hebrew text into syllables through a language model.
How:   Sends the user's syllables prompt (with {text} filled in) and parses
       the answer as one word per line, syllables separated by hyphens.
Who:   POST /api/syllables.

Unlike niqqud, there is no built-in prompt: the output format is defined
entirely by the prompt, so a missing prompt is a configuration error.
"""

import logging
from dataclasses import dataclass

from hebrew_reader.exceptions import LLMServiceError, ValidationError
from hebrew_reader.schemas.analysis import SyllablesResponse
from hebrew_reader.schemas.settings import AppSettings
from hebrew_reader.services.providers import check_request, fill_prompt, select_provider
from hebrew_reader.text.syllables import parse_syllables_response

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "אתה מומחה בעברית. המשימה שלך היא לחלק טקסט עברי להברות. "
    "החזר רק את הטקסט המחולק להברות בפורמט המבוקש ללא הסברים נוספים."
)
MISSING_PROMPT_MESSAGE = "פרומפט לא הוגדר. אנא הגדר פרומפט ב-הגדרות"
EMPTY_RESPONSE_MESSAGE = "המודל החזיר תגובה ריקה"
INVALID_RESPONSE_MESSAGE = "המודל החזיר תגובה לא תקינה. נסה שוב או בחר מודל אחר"

MAX_TOKENS = 4000


@dataclass(frozen=True)
class SyllablesConfig:
    api_key: str
    model: str
    prompt: str
    temperature: float

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "SyllablesConfig":
        return cls(
            api_key=settings.syllables_api_key,
            model=settings.syllables_model,
            prompt=settings.syllables_prompt,
            temperature=settings.syllables_temperature,
        )


class SyllablesService:

    async def divide(self, text: str, config: SyllablesConfig) -> SyllablesResponse:
        """
        Raises:
            ValidationError: empty text, missing key/model/prompt
            LLMServiceError: provider failure, empty or unparseable answer
        """
        provider = select_provider(config.model)
        check_request(text, config.model, config.api_key, provider)
        if not config.prompt or not config.prompt.strip():
            raise ValidationError(message=MISSING_PROMPT_MESSAGE, field="syllablesPrompt")

        raw = await provider.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": fill_prompt(config.prompt, text)},
            ],
            model=config.model,
            api_key=config.api_key or None,
            temperature=config.temperature,
            max_tokens=MAX_TOKENS,
        )
        if not raw.strip():
            raise LLMServiceError(message=EMPTY_RESPONSE_MESSAGE, raw_response=raw)

        words = parse_syllables_response(raw)
        if words is None:
            logger.warning("Unparseable syllables response (%d chars)", len(raw))
            raise LLMServiceError(message=INVALID_RESPONSE_MESSAGE, raw_response=raw)

        return SyllablesResponse(words=words, raw_response=raw)


syllables_service = SyllablesService()
