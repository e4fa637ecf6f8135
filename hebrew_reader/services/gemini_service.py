"""
Hebrew Reader Backend — Google Gemini Service Implementation
============================================================

What:  LLM provider for Gemini models (any model id starting with "gemini").
How:   google-generativeai SDK, configured once with the server key. System
       messages become the model's system_instruction, user messages become
       the content. Retries follow `settings.llm_max_attempts`.

Key handling:
    The SDK authenticates through module-level state (`genai.configure`),
    so a per-request key cannot be used safely under concurrency. Gemini
    calls therefore always use GEMINI_API_KEY; a key stored in the user's
    settings is only used for OpenAI-compatible providers.
"""

import logging
import time
import uuid
from typing import List, Optional

import google.generativeai as genai
from tenacity import (
    before_sleep_log,
    retry,
    stop_after_attempt,
    wait_exponential_jitter,
)

from hebrew_reader.config import settings
from hebrew_reader.exceptions import LLMServiceError
from hebrew_reader.services.llm_base import (
    INVALID_RESPONSE_MESSAGE,
    ChatMessage,
    LLMService,
)

logger = logging.getLogger(__name__)


class GeminiService(LLMService):
    """Google Gemini chat completions."""

    name = "gemini"
    accepts_request_key = False

    def __init__(self, api_key: str = ""):
        self.api_key = api_key
        if api_key:
            genai.configure(api_key=api_key)
        logger.info("GeminiService initialized (key configured=%s)", bool(api_key))

    def has_default_key(self) -> bool:
        return bool(self.api_key)

    async def complete(
        self,
        messages: List[ChatMessage],
        *,
        model: str,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: int = 4000,
    ) -> str:
        request_id = str(uuid.uuid4())[:8]
        model_name = model.split("/", 1)[1] if model.startswith("google/") else model

        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        prompt = "\n\n".join(m["content"] for m in messages if m["role"] != "system")

        generation_config = {"max_output_tokens": max_tokens}
        if temperature is not None:
            generation_config["temperature"] = temperature

        logger.info("[%s] Sending Gemini request: model=%s", request_id, model_name)
        start_time = time.time()

        try:
            text = await self._generate_with_retry(
                model_name, system or None, prompt, generation_config
            )
        except Exception as e:
            logger.error(
                "[%s] Gemini call failed after %.0fms: %s",
                request_id,
                (time.time() - start_time) * 1000,
                str(e),
            )
            raise LLMServiceError(
                message=f"שגיאת API: {e}",
                context={"request_id": request_id, "provider": self.name,
                         "error_type": type(e).__name__},
            ) from e

        if not text:
            raise LLMServiceError(
                message=INVALID_RESPONSE_MESSAGE,
                context={"request_id": request_id, "provider": self.name},
            )

        logger.info(
            "[%s] Gemini completed in %.0fms, %d chars",
            request_id, (time.time() - start_time) * 1000, len(text),
        )
        return text

    @retry(
        stop=stop_after_attempt(settings.llm_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _generate_with_retry(
        self,
        model_name: str,
        system: Optional[str],
        prompt: str,
        generation_config: dict,
    ) -> str:
        model = genai.GenerativeModel(model_name, system_instruction=system)
        response = await model.generate_content_async(
            prompt,
            generation_config=generation_config,
            request_options={"timeout": settings.llm_timeout_seconds},
        )
        return response.text.strip() if response.text else ""


# ── Singleton Instance ────────────────────────────────────────────────────
gemini_service = GeminiService(api_key=settings.gemini_api_key)
