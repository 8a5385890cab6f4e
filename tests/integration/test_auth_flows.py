"""
Integration tests for login, two-factor verification, registration and logout.
"""

import json

import httpx
import pytest

from dashboard_client.adapters.memory_token_store import MemoryTokenStore
from dashboard_client.sdk.auth import LoginResult, TwoFactorChallenge


def tokens_response(access="access-1", refresh="refresh-1"):
    return httpx.Response(200, json={
        "success": True,
        "data": {
            "tokens": {"accessToken": access, "refreshToken": refresh},
            "user": {"id": "usr_1", "email": "admin@example.com", "role": "ADMIN"},
        },
    })


@pytest.mark.asyncio
async def test_login_stores_session(make_rest_client):
    """A plain login stores both tokens."""
    store = MemoryTokenStore()
    client = make_rest_client(lambda request: tokens_response(), store=store)

    result = await client.auth.login("admin@example.com", "secret")

    assert isinstance(result, LoginResult)
    assert result.user["email"] == "admin@example.com"
    assert store.get_access_token() == "access-1"
    assert store.get_refresh_token() == "refresh-1"
    assert client.is_authenticated


@pytest.mark.asyncio
async def test_login_with_two_factor(make_rest_client):
    """2FA accounts get a challenge; verification uses the interim token."""
    store = MemoryTokenStore()
    seen = {}

    def handler(request):
        if request.url.path.endswith("/auth/login"):
            return httpx.Response(200, json={
                "success": True,
                "message": "TOTP required",
                "data": {"requires2FA": True, "interimToken": "interim-1"},
            })
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return tokens_response(access="access-2fa")

    client = make_rest_client(handler, store=store)

    challenge = await client.auth.login("admin@example.com", "secret")
    assert isinstance(challenge, TwoFactorChallenge)
    assert challenge.interim_token == "interim-1"
    assert store.get_access_token() is None

    result = await client.auth.verify_2fa(challenge.interim_token, "123456")

    assert seen == {"auth": "Bearer interim-1", "body": {"token": "123456"}}
    assert result.session.access_token == "access-2fa"
    assert store.get_access_token() == "access-2fa"


@pytest.mark.asyncio
async def test_register_without_tokens(make_rest_client):
    """Registration pending email verification signs nobody in."""
    store = MemoryTokenStore()

    def handler(request):
        return httpx.Response(201, json={"success": True, "data": {"user": {"id": "usr_2"}}})

    client = make_rest_client(handler, store=store)

    assert await client.auth.register("new@example.com", "secret", "New User") is None
    assert store.get_access_token() is None


@pytest.mark.asyncio
async def test_logout_clears_session_when_server_fails(make_rest_client):
    """Local logout always happens."""
    store = MemoryTokenStore(access_token="access-1", refresh_token="refresh-1")
    client = make_rest_client(lambda request: httpx.Response(503), store=store)

    await client.auth.logout()

    assert store.get_access_token() is None
    assert store.get_refresh_token() is None
