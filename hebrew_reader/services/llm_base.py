"""
Hebrew Reader Backend — Abstract LLM Service Interface
======================================================

What:  Abstract base class for chat-style language model providers.
How:   Concrete providers (OpenAI-compatible over httpx, Google Gemini over
       google-generativeai) implement `complete()`. Callers pick a provider
       with `select_provider()` and never branch on the vendor themselves.
Who:   Called by the niqqud, syllables and morphology services.

Contract:
    - `complete()` returns the assistant text, stripped of surrounding
      whitespace, and never returns an empty string. Empty or malformed
      provider answers raise LLMServiceError.
    - All provider-specific failures are wrapped in LLMServiceError, whose
      message is already phrased for the end user.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

ChatMessage = Dict[str, str]

# Shown when a provider answer has no assistant text
INVALID_RESPONSE_MESSAGE = "תגובה לא תקינה מהמודל"


class LLMService(ABC):
    """Abstract interface for chat completion providers."""

    #: Short provider name used in logs and the health endpoint
    name: str = "llm"

    #: False when the provider only authenticates with the server key
    accepts_request_key: bool = True

    @abstractmethod
    async def complete(
        self,
        messages: List[ChatMessage],
        *,
        model: str,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: int = 4000,
    ) -> str:
        """
        Send a chat conversation and return the assistant's reply.

        Args:
            messages:    [{"role": "system"|"user", "content": "..."}]
            model:       Provider model id (e.g. "gpt-4o", "gemini-1.5-pro")
            api_key:     Caller-supplied key; falls back to the server key
            temperature: Omitted from the request when None

        Raises:
            LLMServiceError: Non-2xx response, timeout, or empty answer.
        """
        ...

    @abstractmethod
    def has_default_key(self) -> bool:
        """True when the server is configured with a key for this provider."""
        ...

    async def aclose(self) -> None:
        """Release network resources. Called on application shutdown."""
        return None


def is_google_model(model: str) -> bool:
    """Gemini models are called through the Google SDK, not an OpenAI-style URL."""
    normalized = model.strip().lower()
    for prefix in ("models/", "google/"):
        if normalized.startswith(prefix):
            normalized = normalized[len(prefix):]
    return normalized.startswith("gemini")
