"""Tests for hosted-auth token verification."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from kundapay.api.deps import get_current_user_id
from kundapay.core import security


def _token(**claims) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(uuid.uuid4()),
        "aud": "authenticated",
        "iat": now,
        "exp": now + timedelta(minutes=5),
    }
    payload.update(claims)
    return jwt.encode(payload, security._secret, algorithm="HS256")


class TestDecodeToken:
    def test_round_trip(self):
        user_id = uuid.uuid4()
        token = security.create_access_token(str(user_id), "a@b.cd")
        payload = security.decode_token(token)
        assert payload["sub"] == str(user_id)
        assert payload["email"] == "a@b.cd"
        assert payload["role"] == "authenticated"

    def test_expired(self):
        token = security.create_access_token(str(uuid.uuid4()), "a@b.cd", expires_minutes=-1)
        with pytest.raises(HTTPException) as exc_info:
            security.decode_token(token)
        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_wrong_audience(self):
        with pytest.raises(HTTPException) as exc_info:
            security.decode_token(_token(aud="anon"))
        assert exc_info.value.detail == "Invalid token"

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "x", "aud": "authenticated"}, "other-secret-value-long-enough", algorithm="HS256")
        with pytest.raises(HTTPException) as exc_info:
            security.decode_token(token)
        assert exc_info.value.status_code == 401


class TestCurrentUserId:

    @pytest.mark.asyncio
    async def test_returns_uuid(self):
        user_id = uuid.uuid4()
        assert await get_current_user_id(f"Bearer {_token(sub=str(user_id))}") == user_id

    @pytest.mark.asyncio
    async def test_non_uuid_subject(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user_id(f"Bearer {_token(sub='service-account')}")
        assert exc_info.value.detail == "Invalid token subject"
