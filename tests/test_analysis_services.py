"""
Hebrew Reader Backend — Text Analysis Service Tests
===================================================

What:  Niqqud, syllables and morphology services with the provider mocked,
       plus the analysis routes end to end.

What we test:
    ✅ Prompt selection (full vs completion niqqud, defaults vs settings)
    ✅ Config derived from effective settings (incl. morphologyUseNiqqudKey)
    ✅ Validation errors before any provider call
    ✅ Response parsing and error translation
    ✅ analyze_morphology() never raises
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from hebrew_reader.exceptions import LLMServiceError, ValidationError
from hebrew_reader.schemas.settings import AppSettings
from hebrew_reader.services.morphology_service import (
    JSON_PARSE_ERROR_MESSAGE,
    MorphologyConfig,
    MorphologyService,
    analyze_morphology,
    morphology_service,
)
from hebrew_reader.services.niqqud_service import (
    DEFAULT_SYSTEM_PROMPT,
    NiqqudConfig,
    NiqqudService,
)
from hebrew_reader.services.syllables_service import (
    EMPTY_RESPONSE_MESSAGE,
    INVALID_RESPONSE_MESSAGE,
    MISSING_PROMPT_MESSAGE,
    SyllablesConfig,
    SyllablesService,
)

MORPHOLOGY_WORD = {
    "word": "קָם",
    "pos": "verb",
    "morphology_parts": [{"text": "קָם", "type": "stem", "role": "stem"}],
    "syllables": ["קָם"],
    "confidence": 0.9,
    "binyan": "paal",
}


def fake_provider(answer="", error=None, has_key=True):
    provider = MagicMock()
    provider.has_default_key.return_value = has_key
    provider.complete = AsyncMock(return_value=answer, side_effect=error)
    return provider


class TestNiqqudService:

    def setup_method(self):
        self.service = NiqqudService()
        self.config = NiqqudConfig(api_key="sk-user", model="gpt-4o", temperature=0.2)

    @pytest.mark.asyncio
    async def test_full_vocalization(self):
        provider = fake_provider("שָׁלוֹם עוֹלָם")
        with patch("hebrew_reader.services.niqqud_service.select_provider", return_value=provider):
            result = await self.service.add_niqqud("שלום עולם", self.config)

        assert result.niqqud_text == "שָׁלוֹם עוֹלָם"
        assert result.mode == "full"
        messages = provider.complete.call_args.args[0]
        assert messages[0] == {"role": "system", "content": DEFAULT_SYSTEM_PROMPT}
        assert messages[1]["content"] == "הוסף ניקוד מלא לטקסט הבא:\n\nשלום עולם"
        assert provider.complete.call_args.kwargs["max_tokens"] == 4000
        assert provider.complete.call_args.kwargs["temperature"] == 0.2

    @pytest.mark.asyncio
    async def test_partial_text_uses_completion_prompts(self):
        provider = fake_provider("שָׁלוֹם עוֹלָם גָּדוֹל מְאוֹד")
        with patch("hebrew_reader.services.niqqud_service.select_provider", return_value=provider):
            result = await self.service.add_niqqud("שָׁלוֹם עולם גדול מאוד", self.config)

        assert result.mode == "completion"
        messages = provider.complete.call_args.args[0]
        assert messages[1]["content"].startswith("השלם את הניקוד")

    @pytest.mark.asyncio
    async def test_empty_text_rejected_before_call(self):
        provider = fake_provider()
        with patch("hebrew_reader.services.niqqud_service.select_provider", return_value=provider):
            with pytest.raises(ValidationError, match="טקסט ריק"):
                await self.service.add_niqqud("   ", self.config)

        provider.complete.assert_not_called()

    def test_config_from_settings(self):
        settings = AppSettings(
            niqqud_api_key="sk-user",
            niqqud_model="gpt-4o",
            niqqud_prompt="ישן: {text}",
            niqqud_temperature=0,
        )
        config = NiqqudConfig.from_settings(settings)

        assert config.user_prompt == "ישן: {text}"
        assert config.system_prompt == DEFAULT_SYSTEM_PROMPT
        assert config.temperature == 0


class TestSyllablesService:

    def setup_method(self):
        self.service = SyllablesService()
        self.config = SyllablesConfig(
            api_key="sk-user", model="gpt-4o", prompt="חלק להברות: {text}", temperature=0.2
        )

    @pytest.mark.asyncio
    async def test_divide(self):
        provider = fake_provider("דַּ-נִי\nקָם")
        with patch("hebrew_reader.services.syllables_service.select_provider", return_value=provider):
            result = await self.service.divide("דני קם", self.config)

        assert [w.word for w in result.words] == ["דני", "קם"]
        assert result.raw_response == "דַּ-נִי\nקָם"
        assert provider.complete.call_args.args[0][1]["content"] == "חלק להברות: דני קם"

    @pytest.mark.asyncio
    async def test_missing_prompt(self):
        config = SyllablesConfig(api_key="sk-user", model="gpt-4o", prompt=" ", temperature=0.2)
        provider = fake_provider()
        with patch("hebrew_reader.services.syllables_service.select_provider", return_value=provider):
            with pytest.raises(ValidationError) as exc_info:
                await self.service.divide("דני", config)

        assert exc_info.value.message == MISSING_PROMPT_MESSAGE
        provider.complete.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "answer,message",
        [("   ", EMPTY_RESPONSE_MESSAGE), ("- -\n-", INVALID_RESPONSE_MESSAGE)],
    )
    async def test_unusable_answers(self, answer, message):
        provider = fake_provider(answer)
        with patch("hebrew_reader.services.syllables_service.select_provider", return_value=provider):
            with pytest.raises(LLMServiceError) as exc_info:
                await self.service.divide("דני", self.config)

        assert exc_info.value.message == message


class TestMorphologyService:

    def setup_method(self):
        self.config = MorphologyConfig(api_key="sk-or", model="openai/gpt-4o")

    @pytest.mark.asyncio
    async def test_analyze_fenced_answer(self):
        raw = "```json\n" + json.dumps([MORPHOLOGY_WORD], ensure_ascii=False) + "\n```"
        provider = fake_provider(raw)
        service = MorphologyService(provider=provider)

        result = await service.analyze("קָם", self.config)

        assert result.success
        assert result.raw_response == raw
        assert result.results[0].data["word"] == "קָם"
        assert result.results[0].validation.valid
        assert provider.complete.call_args.kwargs["max_tokens"] == 8000
        assert provider.complete.call_args.kwargs["temperature"] is None

    @pytest.mark.asyncio
    async def test_invalid_json_raises_with_raw_response(self):
        service = MorphologyService(provider=fake_provider("I cannot help with that"))

        with pytest.raises(LLMServiceError) as exc_info:
            await service.analyze("קָם", self.config)

        assert exc_info.value.message == JSON_PARSE_ERROR_MESSAGE
        assert exc_info.value.raw_response == "I cannot help with that"

    @pytest.mark.asyncio
    async def test_result_wrapper_never_raises(self):
        service = MorphologyService(provider=fake_provider("not json"))

        result = await analyze_morphology("קָם", self.config, service=service)

        assert not result.success
        assert result.error == JSON_PARSE_ERROR_MESSAGE
        assert result.raw_response == "not json"

    @pytest.mark.asyncio
    async def test_result_wrapper_reports_validation_errors(self):
        service = MorphologyService(provider=fake_provider(has_key=False))
        config = MorphologyConfig(api_key="", model="openai/gpt-4o")

        result = await analyze_morphology("קָם", config, service=service)

        assert not result.success
        assert result.error == "API Key לא הוגדר. אנא הגדר ב-הגדרות"

    @pytest.mark.asyncio
    async def test_result_wrapper_unexpected_error(self):
        service = MorphologyService(provider=fake_provider(error=RuntimeError("boom")))

        result = await analyze_morphology("קָם", self.config, service=service)

        assert not result.success
        assert result.error == "boom"

    def test_reuse_niqqud_key(self):
        settings = AppSettings(
            niqqud_api_key="sk-niqqud",
            morphology_api_key="sk-morph",
            morphology_use_niqqud_key=True,
        )
        assert MorphologyConfig.from_settings(settings).api_key == "sk-niqqud"

        settings = settings.model_copy(update={"morphology_use_niqqud_key": False})
        assert MorphologyConfig.from_settings(settings).api_key == "sk-morph"


class TestAnalysisRoutes:

    @pytest.mark.asyncio
    async def test_niqqud_uses_saved_settings(self, test_client):
        headers = {"Cookie": "user_id=user_1700000000000_analysis1"}
        await test_client.put(
            "/api/settings",
            json={"niqqudApiKey": "sk-user", "niqqudModel": "gpt-4o"},
            headers=headers,
        )

        provider = fake_provider("שָׁלוֹם")
        with patch("hebrew_reader.services.niqqud_service.select_provider", return_value=provider):
            response = await test_client.post("/api/niqqud", json={"text": "שלום"}, headers=headers)

        assert response.status_code == 200
        assert response.json() == {"niqqudText": "שָׁלוֹם", "mode": "full"}
        assert provider.complete.call_args.kwargs["api_key"] == "sk-user"
        assert provider.complete.call_args.kwargs["model"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_missing_model_returns_400(self, test_client):
        provider = fake_provider(has_key=True)
        with patch("hebrew_reader.services.niqqud_service.select_provider", return_value=provider):
            response = await test_client.post("/api/niqqud", json={"text": "שלום"})

        assert response.status_code == 400
        assert response.json()["error"] == "מודל שפה לא נבחר. אנא בחר מודל ב-הגדרות"

    @pytest.mark.asyncio
    async def test_provider_failure_returns_503(self, test_client):
        headers = {"Cookie": "user_id=user_1700000000000_analysis2"}
        await test_client.put(
            "/api/settings",
            json={"syllablesApiKey": "sk", "syllablesModel": "gpt-4o", "syllablesPrompt": "{text}"},
            headers=headers,
        )

        provider = fake_provider(error=LLMServiceError(message="Invalid API key"))
        with patch("hebrew_reader.services.syllables_service.select_provider", return_value=provider):
            response = await test_client.post("/api/syllables", json={"text": "דני"}, headers=headers)

        assert response.status_code == 503
        assert response.json() == {
            "error": "Invalid API key",
            "code": "llm_service_error",
            "request_id": response.headers["x-request-id"],
        }

    @pytest.mark.asyncio
    async def test_morphology_route(self, test_client):
        headers = {"Cookie": "user_id=user_1700000000000_analysis3"}
        await test_client.put(
            "/api/settings",
            json={"morphologyApiKey": "sk-or", "morphologyModel": "openai/gpt-4o"},
            headers=headers,
        )
        raw = json.dumps([MORPHOLOGY_WORD], ensure_ascii=False)

        with patch.object(morphology_service, "provider", fake_provider(raw)):
            response = await test_client.post("/api/morphology", json={"text": "קָם"}, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["results"][0]["validation"] == {"valid": True, "errors": []}
        assert body["rawResponse"] == raw

    @pytest.mark.asyncio
    async def test_morphology_route_reports_malformed_fields(self, test_client):
        headers = {"Cookie": "user_id=user_1700000000000_analysis4"}
        await test_client.put(
            "/api/settings",
            json={"morphologyApiKey": "sk-or", "morphologyModel": "openai/gpt-4o"},
            headers=headers,
        )
        raw = json.dumps([{**MORPHOLOGY_WORD, "binyan": ["paal"]}], ensure_ascii=False)

        with patch.object(morphology_service, "provider", fake_provider(raw)):
            response = await test_client.post("/api/morphology", json={"text": "קָם"}, headers=headers)

        assert response.status_code == 200
        validation = response.json()["results"][0]["validation"]
        assert validation["valid"] is False
        assert any("בניין" in e for e in validation["errors"])
