"""
Hebrew Reader Backend — Provider Selection
==========================================

What:  Maps a model id to the LLM service that can serve it, and runs the
       input checks every analysis call shares.
Who:   Niqqud and syllables services (morphology always uses OpenRouter).

The checks run in a fixed order (text, key, model), so a user who has
configured nothing sees the key message before the model message.
A key from the user's settings only counts for providers that accept one
(not Gemini).
"""

from typing import Optional

from hebrew_reader.exceptions import ValidationError
from hebrew_reader.services.gemini_service import gemini_service
from hebrew_reader.services.llm_base import LLMService, is_google_model
from hebrew_reader.services.openai_service import openai_service

EMPTY_TEXT_MESSAGE = "טקסט ריק"
MISSING_KEY_MESSAGE = "API Key לא הוגדר. אנא הגדר ב-הגדרות"
MISSING_MODEL_MESSAGE = "מודל שפה לא נבחר. אנא בחר מודל ב-הגדרות"


def select_provider(model: str) -> LLMService:
    """Gemini models go to the Google SDK; everything else is OpenAI-compatible."""
    if model and is_google_model(model):
        return gemini_service
    return openai_service


def check_request(
    text: str,
    model: str,
    api_key: Optional[str],
    provider: LLMService,
) -> None:
    """
    Validate the inputs of an analysis call.

    Raises:
        ValidationError: with the Hebrew message shown to the user.
    """
    if not text or not text.strip():
        raise ValidationError(message=EMPTY_TEXT_MESSAGE, field="text")
    user_key = bool(api_key and api_key.strip()) and provider.accepts_request_key
    if not user_key and not provider.has_default_key():
        raise ValidationError(message=MISSING_KEY_MESSAGE, field="apiKey")
    if not model or not model.strip():
        raise ValidationError(message=MISSING_MODEL_MESSAGE, field="model")


def fill_prompt(template: str, text: str) -> str:
    """Insert `text` at every {text} placeholder, or append it when there is none."""
    if "{text}" in template:
        return template.replace("{text}", text)
    return f"{template}\n\n{text}"
