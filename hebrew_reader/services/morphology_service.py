"""
Hebrew Reader Backend — Morphology Analysis Service
===================================================

What:  Sends vocalized Hebrew text to OpenRouter for word-by-word
       morphological analysis and validates the returned JSON.
How:   1. Check text / key / model
       2. Build the prompt ({text} placeholder, default prompt if unset)
       3. POST to OpenRouter (max_tokens 8000, optional temperature)
       4. Strip a ```json fence, parse, wrap a single object in a list
       5. Validate each word and attach the result

Two entry points:
    MorphologyService.analyze()  raises ValidationError / LLMServiceError;
                                 used by the HTTP route.
    analyze_morphology()         never raises; returns a
                                 MorphologyServiceResponse result object;
                                 used by the client state container.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from hebrew_reader.exceptions import LLMServiceError, ReaderError
from hebrew_reader.schemas.analysis import MorphologyServiceResponse
from hebrew_reader.schemas.settings import AppSettings
from hebrew_reader.services.llm_base import LLMService
from hebrew_reader.services.openai_service import openrouter_service
from hebrew_reader.services.providers import check_request
from hebrew_reader.text.morphology import (
    build_morphology_prompt,
    parse_morphology_json,
    to_results,
)

logger = logging.getLogger(__name__)

JSON_PARSE_ERROR_MESSAGE = "שגיאה בפענוח תגובת JSON מהמודל"
UNEXPECTED_ERROR_MESSAGE = "שגיאה לא צפויה בניתוח מורפולוגי"

MAX_TOKENS = 8000


@dataclass(frozen=True)
class MorphologyConfig:
    api_key: str
    model: str
    prompt: str = ""
    temperature: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "MorphologyConfig":
        """Reuse the niqqud key when the user asked for it and one exists."""
        if settings.morphology_use_niqqud_key and settings.niqqud_api_key:
            api_key = settings.niqqud_api_key
        else:
            api_key = settings.morphology_api_key
        return cls(
            api_key=api_key,
            model=settings.morphology_model,
            prompt=settings.morphology_prompt,
            temperature=settings.morphology_temperature,
        )


class MorphologyService:

    def __init__(self, provider: LLMService = openrouter_service):
        self.provider = provider

    async def analyze(self, text: str, config: MorphologyConfig) -> MorphologyServiceResponse:
        check_request(text, config.model, config.api_key, self.provider)

        logger.info(
            "Morphology request: model=%s, chars=%d, preview=%r",
            config.model, len(text), text[:50],
        )
        raw = await self.provider.complete(
            [{"role": "user", "content": build_morphology_prompt(text, config.prompt)}],
            model=config.model,
            api_key=config.api_key or None,
            temperature=config.temperature,
            max_tokens=MAX_TOKENS,
        )

        try:
            items = parse_morphology_json(raw)
        except json.JSONDecodeError as e:
            logger.error("Morphology JSON parse error: %s | %r", str(e), raw[:200])
            raise LLMServiceError(
                message=JSON_PARSE_ERROR_MESSAGE,
                raw_response=raw,
                context={"position": e.pos},
            ) from e

        results = to_results(items)
        logger.info(
            "Morphology analysis complete: words=%d, valid=%d",
            len(results),
            sum(1 for r in results if r.validation.valid),
        )
        return MorphologyServiceResponse(success=True, results=results, raw_response=raw)


morphology_service = MorphologyService()


async def analyze_morphology(
    text: str,
    config: MorphologyConfig,
    service: Optional[MorphologyService] = None,
) -> MorphologyServiceResponse:
    """Result-object wrapper around MorphologyService.analyze()."""
    service = service or morphology_service
    try:
        return await service.analyze(text, config)
    except LLMServiceError as e:
        return MorphologyServiceResponse(
            success=False, error=e.message, raw_response=e.raw_response
        )
    except ReaderError as e:
        return MorphologyServiceResponse(success=False, error=e.message)
    except Exception as e:
        logger.error("Unexpected morphology error: %s", str(e), exc_info=True)
        return MorphologyServiceResponse(
            success=False, error=str(e) or UNEXPECTED_ERROR_MESSAGE
        )
