"""
Hebrew Reader Backend — Settings Endpoint Tests
===============================================

What we test:
    ✅ Anonymous GET issues the user_id cookie once, with a one-year max-age
    ✅ PUT merges partial updates; GET returns them with defaults filled in
    ✅ App defaults apply where the user saved nothing
    ✅ Signed-in users: saved wordSpacing preference wins over stored settings
    ✅ Malformed bodies → 400 "Invalid request body"
    ✅ Persistence failures → 500 with the fixed message
    ✅ /api/preferences requires a signed-in user
"""

import json
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select

from hebrew_reader.models.app_default import AppDefault
from hebrew_reader.models.profile import Profile
from hebrew_reader.models.user_settings import UserSettings
from hebrew_reader.services.settings_service import settings_service


def cookie_header(user_id: str) -> dict:
    return {"Cookie": f"user_id={user_id}"}


class TestGetSettings:

    @pytest.mark.asyncio
    async def test_first_visit_issues_cookie(self, test_client):
        response = await test_client.get("/api/settings")

        assert response.status_code == 200
        user_id = response.cookies.get("user_id")
        assert user_id is not None
        assert user_id.startswith("user_")

        set_cookie = response.headers["set-cookie"].lower()
        assert "max-age=31536000" in set_cookie
        assert "path=/" in set_cookie
        assert "samesite=lax" in set_cookie
        assert "httponly" in set_cookie

    @pytest.mark.asyncio
    async def test_returning_visitor_gets_no_new_cookie(self, test_client):
        response = await test_client.get(
            "/api/settings", headers=cookie_header("user_1700000000000_abc123def")
        )

        assert response.status_code == 200
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_repeated_get_is_idempotent(self, test_client):
        headers = cookie_header("user_1700000000000_idempoten")
        first = await test_client.get("/api/settings", headers=headers)
        second = await test_client.get("/api/settings", headers=headers)

        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_new_user_gets_builtin_defaults(self, test_client):
        response = await test_client.get("/api/settings")
        data = response.json()

        assert data["fontSize"] == 30
        assert data["wordSpacing"] == 12
        assert data["wordHighlightPadding"] == 4
        assert data["stylingPreset"] == "default"
        assert data["morphologyUseNiqqudKey"] is False
        assert data["niqqudApiKey"] == ""

    @pytest.mark.asyncio
    async def test_app_defaults_fill_unsaved_fields(self, test_client, session_factory):
        async with session_factory() as session:
            session.add(AppDefault(key="font_size", value=36))
            session.add(AppDefault(key="niqqud_model", value="gpt-4o"))
            await session.commit()

        data = (await test_client.get("/api/settings")).json()

        assert data["fontSize"] == 36
        assert data["niqqudModel"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_api_key_defaults_are_never_applied(self, test_client, session_factory):
        async with session_factory() as session:
            session.add(AppDefault(key="niqqud_api_key", value="sk-leaked"))
            await session.commit()

        data = (await test_client.get("/api/settings")).json()

        assert data["niqqudApiKey"] == ""

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_500(self, test_client):
        with patch.object(
            settings_service, "_resolve", AsyncMock(side_effect=RuntimeError("db down"))
        ):
            response = await test_client.get("/api/settings")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to fetch settings"
        assert "db down" not in json.dumps(body)


class TestPutSettings:

    @pytest.mark.asyncio
    async def test_round_trip_keeps_other_defaults(self, test_client):
        put = await test_client.put("/api/settings", json={"fontSize": 40})

        assert put.status_code == 200
        body = put.json()
        assert body["success"] is True
        assert body["settings"]["fontSize"] == 40

        user_id = put.cookies.get("user_id")
        assert user_id

        data = (await test_client.get("/api/settings", headers=cookie_header(user_id))).json()
        assert data["fontSize"] == 40
        assert data["wordHighlightPadding"] == 4

    @pytest.mark.asyncio
    async def test_partial_updates_are_merged(self, test_client):
        headers = cookie_header("user_1700000000000_mergetest")
        await test_client.put("/api/settings", json={"fontSize": 40}, headers=headers)
        await test_client.put("/api/settings", json={"wordSpacing": 20}, headers=headers)

        data = (await test_client.get("/api/settings", headers=headers)).json()
        assert data["fontSize"] == 40
        assert data["wordSpacing"] == 20

    @pytest.mark.asyncio
    async def test_put_always_refreshes_cookie(self, test_client):
        response = await test_client.put(
            "/api/settings",
            json={"fontSize": 32},
            headers=cookie_header("user_1700000000000_keepme123"),
        )

        assert response.cookies.get("user_id") == "user_1700000000000_keepme123"

    @pytest.mark.asyncio
    async def test_only_sent_fields_are_stored(self, test_client, session_factory):
        user_id = "user_1700000000000_storedonl"
        await test_client.put(
            "/api/settings",
            json={"niqqudModel": "gpt-4o", "unknownField": 1},
            headers=cookie_header(user_id),
        )

        async with session_factory() as session:
            record = (await session.execute(
                select(UserSettings).where(UserSettings.user_id == user_id)
            )).scalar_one()

        assert record.settings == {"niqqud_model": "gpt-4o"}

    @pytest.mark.asyncio
    async def test_zero_temperature_is_kept(self, test_client):
        headers = cookie_header("user_1700000000000_zerotemp1")
        await test_client.put("/api/settings", json={"niqqudTemperature": 0}, headers=headers)

        data = (await test_client.get("/api/settings", headers=headers)).json()
        assert data["niqqudTemperature"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["not json", "[1, 2, 3]", '"text"', '{"fontSize": "big"}'])
    async def test_invalid_body_returns_400(self, test_client, content):
        response = await test_client.put(
            "/api/settings",
            content=content,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request body"
        assert body["code"] == "validation_error"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_save_failure_returns_500(self, test_client):
        with patch.object(
            settings_service, "save_settings", AsyncMock(side_effect=RuntimeError("disk full"))
        ):
            response = await test_client.put("/api/settings", json={"fontSize": 40})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to save settings"


class TestAuthenticatedSettings:

    @pytest.mark.asyncio
    async def test_preference_overrides_stored_word_spacing(
        self, test_client, session_factory, make_profile, auth_headers
    ):
        profile_id = await make_profile(preferences={"wordSpacing": 20})
        async with session_factory() as session:
            session.add(UserSettings(user_id=str(profile_id), settings={"word_spacing": 8}))
            await session.commit()

        response = await test_client.get("/api/settings", headers=auth_headers(profile_id))

        assert response.json()["wordSpacing"] == 20

    @pytest.mark.asyncio
    async def test_put_word_spacing_updates_preference(
        self, test_client, session_factory, make_profile, auth_headers
    ):
        profile_id = await make_profile(preferences={"wordSpacing": 20})

        response = await test_client.put(
            "/api/settings", json={"wordSpacing": 16}, headers=auth_headers(profile_id)
        )

        assert response.status_code == 200
        assert response.json()["settings"]["wordSpacing"] == 16
        async with session_factory() as session:
            profile = await session.get(Profile, profile_id)
        assert profile.preferences["wordSpacing"] == 16

    @pytest.mark.asyncio
    async def test_put_other_field_keeps_preference(
        self, test_client, make_profile, auth_headers
    ):
        profile_id = await make_profile(preferences={"wordSpacing": 20})

        response = await test_client.put(
            "/api/settings", json={"fontSize": 44}, headers=auth_headers(profile_id)
        )

        settings = response.json()["settings"]
        assert settings["wordSpacing"] == 20
        assert settings["fontSize"] == 44

    @pytest.mark.asyncio
    async def test_settings_follow_account_not_cookie(
        self, test_client, make_profile, auth_headers
    ):
        profile_id = await make_profile()
        headers = {**auth_headers(profile_id), **cookie_header("user_1700000000000_device001")}
        await test_client.put("/api/settings", json={"fontSize": 50}, headers=headers)

        other_device = {
            **auth_headers(profile_id),
            **cookie_header("user_1700000000000_device002"),
        }
        data = (await test_client.get("/api/settings", headers=other_device)).json()

        assert data["fontSize"] == 50

    @pytest.mark.asyncio
    async def test_invalid_token_is_treated_as_anonymous(self, test_client):
        response = await test_client.get(
            "/api/settings", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 200
        assert response.cookies.get("user_id")


class TestPreferencesRoutes:

    @pytest.mark.asyncio
    async def test_anonymous_gets_401(self, test_client):
        response = await test_client.get("/api/preferences")

        assert response.status_code == 401
        assert response.json()["code"] == "authentication_required"

    @pytest.mark.asyncio
    async def test_defaults_without_profile(self, test_client, auth_headers):
        response = await test_client.get("/api/preferences", headers=auth_headers(uuid.uuid4()))

        assert response.status_code == 200
        assert response.json() == {"wordSpacing": 12}

    @pytest.mark.asyncio
    async def test_put_then_get(self, test_client, make_profile, auth_headers):
        profile_id = await make_profile()
        headers = auth_headers(profile_id)

        put = await test_client.put("/api/preferences", json={"wordSpacing": 18}, headers=headers)
        got = await test_client.get("/api/preferences", headers=headers)

        assert put.json() == {"wordSpacing": 18}
        assert got.json() == {"wordSpacing": 18}

    @pytest.mark.asyncio
    async def test_empty_update_returns_400(self, test_client, make_profile, auth_headers):
        profile_id = await make_profile()

        response = await test_client.put(
            "/api/preferences", json={}, headers=auth_headers(profile_id)
        )

        assert response.status_code == 400
