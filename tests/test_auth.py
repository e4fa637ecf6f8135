"""
Hebrew Reader Backend — Authentication & Identity Tests
=======================================================

What we test:
    ✅ Token verification: signature, audience, expiry, subject
    ✅ Token from Authorization header or access-token cookie
    ✅ Admin capability lookup (one boolean, failures mean non-admin)
    ✅ Anonymous user id format
"""

import re
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from hebrew_reader.auth import (
    AuthenticatedUser,
    decode_access_token,
    get_admin_capability,
    get_current_user,
)
from hebrew_reader.identity import generate_user_id, settings_owner_id


def make_request(headers=None) -> Request:
    raw_headers = [
        (name.lower().encode(), value.encode()) for name, value in (headers or {}).items()
    ]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers})


class TestDecodeAccessToken:

    def test_valid_token(self, make_token):
        user_id = uuid.uuid4()
        user = decode_access_token(make_token(user_id, email="a@example.com"))

        assert user == AuthenticatedUser(id=user_id, email="a@example.com")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"expires_in": -60},
            {"secret": "another-secret-that-is-long-enough-to-sign"},
            {"audience": "anon"},
        ],
    )
    def test_rejected_tokens(self, make_token, kwargs):
        assert decode_access_token(make_token(uuid.uuid4(), **kwargs)) is None

    def test_non_uuid_subject(self, make_token):
        token = make_token(uuid.uuid4(), subject="not-a-uuid")
        assert decode_access_token(token) is None

    def test_garbage(self):
        assert decode_access_token("abc.def.ghi") is None


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_bearer_header(self, make_token):
        user_id = uuid.uuid4()
        request = make_request({"Authorization": f"Bearer {make_token(user_id)}"})

        user = await get_current_user(request)

        assert user.id == user_id

    @pytest.mark.asyncio
    async def test_access_token_cookie(self, make_token):
        user_id = uuid.uuid4()
        request = make_request({"Cookie": f"sb-access-token={make_token(user_id)}"})

        user = await get_current_user(request)

        assert user.id == user_id

    @pytest.mark.asyncio
    async def test_anonymous(self):
        assert await get_current_user(make_request()) is None


class TestAdminCapability:

    @pytest.mark.asyncio
    async def test_anonymous_is_not_admin(self, mock_db_session):
        capability = await get_admin_capability(user=None, db=mock_db_session)

        assert capability.is_admin is False
        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_admin_flag(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = True
        mock_db_session.execute = AsyncMock(return_value=result)
        user = AuthenticatedUser(id=uuid.uuid4())

        capability = await get_admin_capability(user=user, db=mock_db_session)

        assert capability.is_admin is True
        assert capability.user == user

    @pytest.mark.asyncio
    async def test_lookup_failure_is_not_admin(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=RuntimeError("db down"))

        capability = await get_admin_capability(
            user=AuthenticatedUser(id=uuid.uuid4()), db=mock_db_session
        )

        assert capability.is_admin is False


class TestIdentity:

    def test_generated_id_format(self):
        assert re.fullmatch(r"user_\d{13}_[a-z0-9]{9}", generate_user_id())

    def test_generated_ids_differ(self):
        assert generate_user_id() != generate_user_id()

    def test_settings_owner(self):
        user = AuthenticatedUser(id=uuid.uuid4())
        assert settings_owner_id("user_1_abc", user) == str(user.id)
        assert settings_owner_id("user_1_abc", None) == "user_1_abc"
