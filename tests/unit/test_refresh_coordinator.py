"""
Unit tests for RefreshCoordinator and refresh payload parsing.
"""

import asyncio

import httpx
import pytest

from dashboard_client.adapters.memory_token_store import MemoryTokenStore
from dashboard_client.domain.session import Session
from dashboard_client.exceptions import AuthenticationError, SessionExpiredError
from dashboard_client.sdk.logout import TerminalLogout
from dashboard_client.sdk.pipeline import RequestEnvelope
from dashboard_client.sdk.refresh import RefreshCoordinator, parse_token_payload


def unauthorized(path="/api/admin/users"):
    request = httpx.Request("GET", f"http://api.test{path}")
    response = httpx.Response(401, request=request)
    return RequestEnvelope(request), httpx.HTTPStatusError("401", request=request, response=response)


@pytest.mark.parametrize("payload", [
    {"accessToken": "a", "refreshToken": "r"},
    {"success": True, "data": {"accessToken": "a", "refreshToken": "r"}},
    {"success": True, "data": {"tokens": {"accessToken": "a", "refreshToken": "r"}}},
])
def test_parse_token_payload_shapes(payload):
    session = parse_token_payload(payload)

    assert (session.access_token, session.refresh_token) == ("a", "r")


@pytest.mark.parametrize("payload", [
    {"success": False, "data": {"accessToken": "a"}},
    {"success": True, "data": {}},
    {"accessToken": ""},
    ["a"],
    None,
])
def test_parse_token_payload_rejects(payload):
    assert parse_token_payload(payload) is None


def test_parse_token_payload_without_rotation():
    assert parse_token_payload({"data": {"accessToken": "a"}}).refresh_token is None


@pytest.mark.asyncio
async def test_refresh_keeps_refresh_token_when_not_rotated():
    store = MemoryTokenStore(access_token="old", refresh_token="refresh-1")

    async def refresh_call(token):
        return Session.from_tokens("new")

    coordinator = RefreshCoordinator(store, refresh_call, TerminalLogout(delay=0))
    envelope, error = unauthorized()

    assert await coordinator.acquire_token(envelope, error) == "new"
    assert store.get_refresh_token() == "refresh-1"


@pytest.mark.asyncio
async def test_refresh_call_error_ends_session():
    """A network error during refresh is a failed refresh."""
    store = MemoryTokenStore(access_token="old", refresh_token="refresh-1")

    async def refresh_call(token):
        raise httpx.ReadTimeout("timed out")

    logout = TerminalLogout(delay=0)
    coordinator = RefreshCoordinator(store, refresh_call, logout)
    envelope, error = unauthorized()

    with pytest.raises(SessionExpiredError) as exc_info:
        await coordinator.acquire_token(envelope, error)
    await logout.wait()

    assert exc_info.value.__cause__ is error
    assert not store.has_session()
    assert logout.fired_count == 1
    assert coordinator.get_status()["stats"]["failed"] == 1


@pytest.mark.asyncio
async def test_queued_requests_released_in_order():
    store = MemoryTokenStore(access_token="old", refresh_token="refresh-1")
    gate = asyncio.Event()
    order = []

    async def refresh_call(token):
        await gate.wait()
        return Session.from_tokens("new", "refresh-2")

    coordinator = RefreshCoordinator(store, refresh_call, TerminalLogout(delay=0))

    async def caller(name):
        envelope, error = unauthorized(f"/api/{name}")
        token = await coordinator.acquire_token(envelope, error)
        order.append(name)
        return token

    first = asyncio.ensure_future(caller("first"))
    await asyncio.sleep(0)
    queued = [asyncio.ensure_future(caller(name)) for name in ("second", "third")]
    await asyncio.sleep(0)

    assert coordinator.is_refreshing
    assert coordinator.pending_count == 2

    gate.set()
    tokens = await asyncio.gather(first, *queued)

    assert tokens == ["new", "new", "new"]
    assert order == ["first", "second", "third"]
    assert coordinator.pending_count == 0


@pytest.mark.asyncio
async def test_cancelled_refresh_rejects_queue_and_keeps_session():
    """Cancelling the refreshing task fails the waiters but logs nobody out."""
    store = MemoryTokenStore(access_token="old", refresh_token="refresh-1")
    logout = TerminalLogout(delay=0)

    async def refresh_call(token):
        await asyncio.Event().wait()

    coordinator = RefreshCoordinator(store, refresh_call, logout)

    envelope, error = unauthorized()
    refreshing = asyncio.ensure_future(coordinator.acquire_token(envelope, error))
    await asyncio.sleep(0)
    waiting = asyncio.ensure_future(coordinator.acquire_token(*unauthorized("/api/admin/payments")))
    await asyncio.sleep(0)

    refreshing.cancel()
    with pytest.raises(asyncio.CancelledError):
        await refreshing
    with pytest.raises(AuthenticationError, match="cancelled"):
        await waiting

    assert not coordinator.is_refreshing
    assert store.get_access_token() == "old"
    assert store.get_refresh_token() == "refresh-1"
    assert not logout.is_scheduled


class ReadOnlyStore(MemoryTokenStore):
    """Holds a session but cannot persist a new access token."""

    def set_access_token(self, token):
        raise OSError("token file is read-only")


@pytest.mark.asyncio
async def test_unexpected_refresh_error_rejects_queue_and_resets():
    """A refresh call blowing up is a failed refresh, not a stuck coordinator."""
    store = MemoryTokenStore(access_token="old", refresh_token="refresh-1")
    gate = asyncio.Event()

    async def refresh_call(token):
        await gate.wait()
        raise RuntimeError("broken refresh call")

    logout = TerminalLogout(delay=0)
    coordinator = RefreshCoordinator(store, refresh_call, logout)

    first_envelope, first_error = unauthorized()
    first = asyncio.ensure_future(coordinator.acquire_token(first_envelope, first_error))
    await asyncio.sleep(0)
    queued_envelope, queued_error = unauthorized("/api/admin/payments")
    queued = asyncio.ensure_future(coordinator.acquire_token(queued_envelope, queued_error))
    await asyncio.sleep(0)
    gate.set()

    results = await asyncio.wait_for(asyncio.gather(first, queued, return_exceptions=True), timeout=1)
    await logout.wait()

    assert all(isinstance(r, SessionExpiredError) for r in results)
    assert results[1].__cause__ is queued_error
    assert not coordinator.is_refreshing
    assert coordinator.pending_count == 0
    assert not store.has_session()
    assert logout.fired_count == 1

    # the next 401 settles at once instead of queueing forever
    with pytest.raises(SessionExpiredError):
        await asyncio.wait_for(coordinator.acquire_token(*unauthorized()), timeout=1)


@pytest.mark.asyncio
async def test_store_write_failure_rejects_queue_and_resets():
    """If the new token cannot be stored, waiters are rejected and the flag is cleared."""
    store = ReadOnlyStore(access_token="old", refresh_token="refresh-1")
    gate = asyncio.Event()

    async def refresh_call(token):
        await gate.wait()
        return Session.from_tokens("new", "refresh-2")

    coordinator = RefreshCoordinator(store, refresh_call, TerminalLogout(delay=0))

    first = asyncio.ensure_future(coordinator.acquire_token(*unauthorized()))
    await asyncio.sleep(0)
    queued_envelope, queued_error = unauthorized("/api/admin/payments")
    queued = asyncio.ensure_future(coordinator.acquire_token(queued_envelope, queued_error))
    await asyncio.sleep(0)
    assert coordinator.pending_count == 1
    gate.set()

    first_result, queued_result = await asyncio.wait_for(
        asyncio.gather(first, queued, return_exceptions=True), timeout=1
    )

    assert isinstance(first_result, OSError)
    assert isinstance(queued_result, SessionExpiredError)
    assert queued_result.__cause__ is queued_error
    assert not coordinator.is_refreshing
    assert coordinator.pending_count == 0
    assert coordinator.get_status()["stats"]["failed"] == 1
