"""
Hebrew Reader Backend — Niqqud Service
======================================

What:  Adds niqqud (vocalization) to Hebrew text through a language model.
How:   Detects how much niqqud the input already carries.
       - none / full → "full" mode: the niqqud prompts, the model vocalizes
         the whole text.
       - partial     → "completion" mode: the completion prompts, the model
         fills in missing marks without touching existing ones.
       Prompts come from the user's settings; empty prompts fall back to
       the defaults below.
Who:   POST /api/niqqud.
"""

import logging
from dataclasses import dataclass
from typing import List

from hebrew_reader.schemas.analysis import NiqqudResponse
from hebrew_reader.schemas.settings import AppSettings
from hebrew_reader.services.llm_base import ChatMessage
from hebrew_reader.services.providers import check_request, fill_prompt, select_provider
from hebrew_reader.text.niqqud import NiqqudStatus, detect_niqqud

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "אתה מומחה בעברית. המשימה שלך היא להוסיף ניקוד מלא לטקסט עברי. "
    "החזר רק את הטקסט המנוקד ללא הסברים נוספים."
)
DEFAULT_USER_PROMPT = "הוסף ניקוד מלא לטקסט הבא:\n\n{text}"

DEFAULT_COMPLETION_SYSTEM_PROMPT = (
    "אתה מומחה בעברית. המשימה שלך היא להשלים ניקוד בטקסט עברי המנוקד חלקית, "
    "בלי לשנות את הניקוד הקיים. החזר רק את הטקסט המנוקד ללא הסברים נוספים."
)
DEFAULT_COMPLETION_USER_PROMPT = "השלם את הניקוד בטקסט הבא:\n\n{text}"

MAX_TOKENS = 4000


@dataclass(frozen=True)
class NiqqudConfig:
    api_key: str
    model: str
    temperature: float
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    user_prompt: str = DEFAULT_USER_PROMPT
    completion_system_prompt: str = DEFAULT_COMPLETION_SYSTEM_PROMPT
    completion_user_prompt: str = DEFAULT_COMPLETION_USER_PROMPT

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "NiqqudConfig":
        return cls(
            api_key=settings.niqqud_api_key,
            model=settings.niqqud_model,
            temperature=settings.niqqud_temperature,
            system_prompt=settings.niqqud_system_prompt or DEFAULT_SYSTEM_PROMPT,
            # niqqudPrompt is the older single-prompt field
            user_prompt=(
                settings.niqqud_user_prompt or settings.niqqud_prompt or DEFAULT_USER_PROMPT
            ),
            completion_system_prompt=(
                settings.niqqud_completion_system_prompt or DEFAULT_COMPLETION_SYSTEM_PROMPT
            ),
            completion_user_prompt=(
                settings.niqqud_completion_user_prompt or DEFAULT_COMPLETION_USER_PROMPT
            ),
        )


class NiqqudService:
    """Vocalizes Hebrew text with the user's configured model."""

    def build_messages(self, text: str, config: NiqqudConfig, completion: bool) -> List[ChatMessage]:
        if completion:
            system, user = config.completion_system_prompt, config.completion_user_prompt
        else:
            system, user = config.system_prompt, config.user_prompt
        return [
            {"role": "system", "content": system},
            {"role": "user", "content": fill_prompt(user, text)},
        ]

    async def add_niqqud(self, text: str, config: NiqqudConfig) -> NiqqudResponse:
        """
        Raises:
            ValidationError: empty text, missing key, or missing model
            LLMServiceError: provider failure or empty answer
        """
        provider = select_provider(config.model)
        check_request(text, config.model, config.api_key, provider)

        completion = detect_niqqud(text) is NiqqudStatus.PARTIAL
        mode = "completion" if completion else "full"
        logger.info("Niqqud request: mode=%s, model=%s, chars=%d", mode, config.model, len(text))

        niqqud_text = await provider.complete(
            self.build_messages(text, config, completion),
            model=config.model,
            api_key=config.api_key or None,
            temperature=config.temperature,
            max_tokens=MAX_TOKENS,
        )
        return NiqqudResponse(niqqud_text=niqqud_text, mode=mode)


niqqud_service = NiqqudService()
