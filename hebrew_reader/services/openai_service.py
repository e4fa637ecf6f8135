"""
Hebrew Reader Backend — OpenAI-Compatible Chat Completions Service
==================================================================

What:  LLM provider for any endpoint speaking the OpenAI chat-completions
       protocol. Two instances exist: OpenAI (niqqud, syllables) and
       OpenRouter (morphology analysis).
How:   One shared httpx.AsyncClient per instance. Transport errors are
       retried by tenacity up to `settings.llm_max_attempts` (1 by default,
       i.e. no retry). HTTP error responses are never retried.

Error translation:
    non-2xx           → LLMServiceError(error.message or "שגיאת API: <status> <reason>")
    no choices/content → LLMServiceError("תגובה לא תקינה מהמודל")
    timeout/network    → LLMServiceError("שגיאת תקשורת עם שירות המודל")
"""

import logging
import time
import uuid
from typing import Any, Dict, List, Optional

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
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

NETWORK_ERROR_MESSAGE = "שגיאת תקשורת עם שירות המודל"


class OpenAICompatibleService(LLMService):
    """Chat completions over HTTP for OpenAI and OpenRouter."""

    def __init__(
        self,
        name: str,
        api_url: str,
        default_api_key: str = "",
        extra_headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.name = name
        self.api_url = api_url
        self.default_api_key = default_api_key
        self.extra_headers = extra_headers or {}
        # Injected in tests (httpx.MockTransport); None means real network
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=settings.llm_timeout_seconds,
                transport=self._transport,
            )
        return self._client

    def has_default_key(self) -> bool:
        return bool(self.default_api_key)

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
        key = api_key or self.default_api_key

        body: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            body["temperature"] = temperature

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {key}",
            **self.extra_headers,
        }

        logger.info(
            "[%s] Sending %s request: model=%s, messages=%d",
            request_id,
            self.name,
            model,
            len(messages),
        )
        start_time = time.time()

        try:
            response = await self._post_with_retry(body, headers)
        except httpx.HTTPError as e:
            logger.error("[%s] %s request failed: %s", request_id, self.name, str(e))
            raise LLMServiceError(
                message=NETWORK_ERROR_MESSAGE,
                context={"request_id": request_id, "provider": self.name,
                         "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000

        if not response.is_success:
            message = self._error_message(response)
            logger.error(
                "[%s] %s API error %d after %.0fms: %s",
                request_id, self.name, response.status_code, duration_ms, message,
            )
            raise LLMServiceError(
                message=message,
                context={"request_id": request_id, "provider": self.name,
                         "status": response.status_code},
            )

        content = self._extract_content(response)
        if not content:
            raise LLMServiceError(
                message=INVALID_RESPONSE_MESSAGE,
                context={"request_id": request_id, "provider": self.name},
            )

        logger.info(
            "[%s] %s completed in %.0fms, %d chars",
            request_id, self.name, duration_ms, len(content),
        )
        return content

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(settings.llm_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _post_with_retry(
        self, body: Dict[str, Any], headers: Dict[str, str]
    ) -> httpx.Response:
        return await self.client.post(self.api_url, json=body, headers=headers)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return f"שגיאת API: {response.status_code} {response.reason_phrase}".strip()

    @staticmethod
    def _extract_content(response: httpx.Response) -> str:
        try:
            payload = response.json()
            content = payload["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            return ""
        return content.strip() if isinstance(content, str) else ""

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()


# ── Singleton Instances ───────────────────────────────────────────────────
openai_service = OpenAICompatibleService(
    name="openai",
    api_url=settings.openai_api_url,
    default_api_key=settings.openai_api_key,
)

openrouter_service = OpenAICompatibleService(
    name="openrouter",
    api_url=settings.openrouter_api_url,
    default_api_key=settings.openrouter_api_key,
    extra_headers={
        "HTTP-Referer": settings.public_app_url,
        "X-Title": "Hebrew Reading App - Morphology Analysis",
    },
)
