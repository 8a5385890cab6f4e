"""
Refresh Coordinator - Single-flight access token refresh.

When many requests hit 401 at once, only the first one calls the refresh
endpoint. The rest park in a FIFO queue and are released with the new
token (or rejected) when that single call settles.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Deque, Dict, Optional

import httpx

from dashboard_client.domain.session import Session
from dashboard_client.exceptions import AuthenticationError, SessionExpiredError
from dashboard_client.ports.token_store_port import TokenStorePort
from dashboard_client.sdk import endpoints
from dashboard_client.sdk.logout import TerminalLogout

if TYPE_CHECKING:
    from dashboard_client.sdk.pipeline import RequestEnvelope

logger = logging.getLogger(__name__)

RefreshCall = Callable[[str], Awaitable[Optional[Session]]]


def parse_token_payload(payload: Any) -> Optional[Session]:
    """
    Extract the new token pair from a refresh response body.

    Accepts ``{accessToken, refreshToken?}`` at the top level, under
    ``data`` or under ``data.tokens``. A body with ``success: false`` or
    without an access token yields None.
    """
    if not isinstance(payload, dict) or payload.get("success") is False:
        return None

    candidates = [payload]
    data = payload.get("data")
    if isinstance(data, dict):
        candidates.append(data)
        if isinstance(data.get("tokens"), dict):
            candidates.append(data["tokens"])

    for candidate in reversed(candidates):
        access_token = candidate.get("accessToken")
        if isinstance(access_token, str) and access_token:
            refresh_token = candidate.get("refreshToken")
            return Session.from_tokens(
                access_token,
                refresh_token if isinstance(refresh_token, str) and refresh_token else None,
            )
    return None


class HttpRefreshCall:
    """
    POST the refresh token to ``auth/refresh``.

    Uses its own bare client, never the request pipeline, so a failing
    refresh cannot recurse into another refresh.
    """

    def __init__(self, base_url: str, timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __call__(self, refresh_token: str) -> Optional[Session]:
        try:
            response = await self._client.post(endpoints.AUTH_REFRESH, json={"refreshToken": refresh_token})
        except httpx.TransportError as e:
            logger.warning("Token refresh request failed: %s", e)
            return None

        if not response.is_success:
            logger.warning("Token refresh rejected with HTTP %s", response.status_code)
            return None

        try:
            return parse_token_payload(response.json())
        except ValueError:
            logger.warning("Token refresh returned a non-JSON body")
            return None

    async def aclose(self) -> None:
        await self._client.aclose()


@dataclass
class PendingRequest:
    """A request parked until the in-flight refresh settles."""
    envelope: "RequestEnvelope"
    error: httpx.HTTPStatusError
    future: asyncio.Future


def _chained(exc: Exception, cause: BaseException) -> Exception:
    exc.__cause__ = cause
    return exc


class RefreshCoordinator:
    """
    Owns the refresh state: one ``is_refreshing`` flag and a FIFO queue.

    Invariant: at most one refresh call is outstanding. The flag and queue
    are only touched between awaits, so a single event loop needs no lock.
    Do not share one coordinator across event loops or threads.
    """

    def __init__(
        self,
        token_store: TokenStorePort,
        refresh_call: RefreshCall,
        terminal_logout: TerminalLogout,
    ):
        """
        Args:
            token_store: Where the token pair lives
            refresh_call: Exchanges a refresh token for a new Session, or
                returns None when the refresh is refused
            terminal_logout: Fired when the refresh fails
        """
        self._store = token_store
        self._refresh_call = refresh_call
        self._logout = terminal_logout

        self._is_refreshing = False
        self._pending: Deque[PendingRequest] = deque()

        self._total_refreshes = 0
        self._failed_refreshes = 0
        self._coalesced = 0

    @property
    def is_refreshing(self) -> bool:
        return self._is_refreshing

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def acquire_token(self, envelope: "RequestEnvelope", error: httpx.HTTPStatusError) -> str:
        """
        Get a fresh access token for a request that failed with 401.

        The first caller performs the refresh; callers arriving while it
        runs are queued and resumed with its result.

        Args:
            envelope: The failed request
            error: The 401 it failed with

        Returns:
            New access token

        Raises:
            SessionExpiredError: If the refresh failed (session is cleared)
        """
        if self._is_refreshing:
            future = asyncio.get_running_loop().create_future()
            self._pending.append(PendingRequest(envelope=envelope, error=error, future=future))
            self._coalesced += 1
            logger.debug(
                "Refresh in progress, queued %s %s (position %d)",
                envelope.request.method,
                envelope.request.url.path,
                len(self._pending),
            )
            return await future

        return await self._refresh(error)

    async def _refresh(self, error: httpx.HTTPStatusError) -> str:
        self._is_refreshing = True
        self._total_refreshes += 1
        try:
            token = await self._exchange(error)
        except asyncio.CancelledError:
            self._reject_pending(lambda: AuthenticationError("Token refresh was cancelled"))
            raise
        except BaseException:
            # includes token store failures
            self._failed_refreshes += 1
            self._reject_pending(lambda: SessionExpiredError("Token refresh failed"))
            raise
        finally:
            self._is_refreshing = False

        released = self._release_pending(token)
        logger.info("Session refreshed, released %d queued request(s)", released)
        return token

    async def _exchange(self, error: httpx.HTTPStatusError) -> str:
        """
        Swap the stored refresh token for a new pair and store it.

        Raises:
            SessionExpiredError: If the refresh was refused (store cleared)
        """
        had_session = self._store.has_session()
        refresh_token = self._store.get_refresh_token()

        logger.info("Access token rejected, refreshing session")
        session: Optional[Session] = None
        if refresh_token:
            try:
                session = await self._refresh_call(refresh_token)
            except Exception as e:
                logger.warning("Token refresh failed: %s", e)
        else:
            logger.warning("No refresh token stored, cannot refresh session")

        if session is None:
            self._store.clear_all()
            self._logout.trigger(had_session)
            raise SessionExpiredError("Token refresh failed") from error

        self._store.set_access_token(session.access_token)
        if session.refresh_token:
            self._store.set_refresh_token(session.refresh_token)
        return session.access_token

    def _release_pending(self, token: str) -> int:
        released = 0
        while self._pending:
            pending = self._pending.popleft()
            if not pending.future.done():
                pending.future.set_result(token)
                released += 1
        return released

    def _reject_pending(self, make_error: Callable[[], Exception]) -> None:
        while self._pending:
            pending = self._pending.popleft()
            if not pending.future.done():
                pending.future.set_exception(_chained(make_error(), pending.error))

    def get_status(self) -> Dict[str, Any]:
        """Current coordinator state for debugging/monitoring."""
        return {
            "is_refreshing": self._is_refreshing,
            "pending_count": len(self._pending),
            "stats": {
                "total": self._total_refreshes,
                "failed": self._failed_refreshes,
                "coalesced": self._coalesced,
            },
        }
