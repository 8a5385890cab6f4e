"""
Request Pipeline - Authenticated HTTP with transparent token refresh.

Every admin REST call goes through ``RequestPipeline.send``:

    attach  -> current access token as ``Authorization: Bearer``
    send    -> httpx.AsyncClient
    classify:
        2xx                          -> response
        401 on an auth endpoint      -> raise (bad credentials, not expiry)
        401 on a retried request     -> terminal logout, SessionExpiredError
        401 otherwise                -> RefreshCoordinator, retry once
        anything else                -> raise httpx.HTTPStatusError
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple

import httpx

from dashboard_client.exceptions import ApiError, SessionExpiredError
from dashboard_client.ports.token_store_port import TokenStorePort
from dashboard_client.sdk.endpoints import is_refresh_exempt
from dashboard_client.sdk.logout import TerminalLogout
from dashboard_client.sdk.refresh import RefreshCoordinator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestEnvelope:
    """
    A request plus its retry state.

    The underlying ``httpx.Request`` is never mutated; each attempt gets a
    fresh copy with its own Authorization header.

    Attributes:
        request: The request as the caller built it
        attempt: 0 for the first send, 1 for the single retry
        token: Access token to use instead of the stored one
    """
    request: httpx.Request
    attempt: int = 0
    token: Optional[str] = None

    @property
    def retried(self) -> bool:
        return self.attempt > 0

    def retry_with(self, token: str) -> "RequestEnvelope":
        return replace(self, attempt=self.attempt + 1, token=token)


def unwrap_envelope(response: httpx.Response) -> Any:
    """
    Return the payload of a ``{success, data, message}`` response body.

    Bodies without the envelope are returned as-is.

    Raises:
        ApiError: If the body reports ``success: false``
    """
    if not response.content:
        return None
    payload = response.json()
    if not isinstance(payload, dict) or "success" not in payload:
        return payload
    if payload["success"] is False:
        message = payload.get("message") or payload.get("error") or "Request failed"
        raise ApiError(str(message), status_code=response.status_code)
    return payload.get("data", payload)


class RequestPipeline:
    """
    The single HTTP pipeline all REST adapters share.

    Example:
        pipeline = RequestPipeline(client, store, coordinator, logout)
        data = await pipeline.fetch("GET", "admin/users", params={"page": 1})
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token_store: TokenStorePort,
        coordinator: RefreshCoordinator,
        terminal_logout: TerminalLogout,
    ):
        """
        Args:
            client: HTTP client with ``base_url`` set to the API root
            token_store: Source of the current access token
            coordinator: Single-flight refresh for 401 responses
            terminal_logout: Fired when a retried request is still rejected
        """
        self._client = client
        self._store = token_store
        self._coordinator = coordinator
        self._logout = terminal_logout

    @property
    def coordinator(self) -> RefreshCoordinator:
        return self._coordinator

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Build and send a request.

        Keyword arguments are passed to ``httpx.AsyncClient.build_request``
        (``params``, ``json``, ``headers``...).
        """
        request = self._client.build_request(method, url, **kwargs)
        return await self.send(RequestEnvelope(request))

    async def fetch(self, method: str, url: str, **kwargs) -> Any:
        """Send a request and return its unwrapped JSON payload."""
        return unwrap_envelope(await self.request(method, url, **kwargs))

    async def get(self, url: str, **kwargs) -> Any:
        return await self.fetch("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> Any:
        return await self.fetch("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> Any:
        return await self.fetch("PUT", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> Any:
        return await self.fetch("DELETE", url, **kwargs)

    async def send(self, envelope: RequestEnvelope) -> httpx.Response:
        """
        Send one attempt of ``envelope`` and classify the response.

        Raises:
            httpx.HTTPStatusError: Non-2xx other than a recoverable 401
            httpx.TransportError: Network failures, unchanged
            SessionExpiredError: The session could not be recovered
        """
        outgoing, sent_token = self._attach(envelope)
        response = await self._client.send(outgoing)

        if response.status_code == 401:
            return await self._on_unauthorized(envelope, response, sent_token)

        response.raise_for_status()
        return response

    def _attach(self, envelope: RequestEnvelope) -> Tuple[httpx.Request, Optional[str]]:
        original = envelope.request
        token = envelope.token
        # A caller-supplied Authorization (e.g. the 2FA interim token) wins on the first attempt.
        if token is None and "Authorization" not in original.headers:
            token = self._store.get_access_token()
        if not token:
            return original, None

        headers = httpx.Headers(original.headers)
        headers["Authorization"] = f"Bearer {token}"
        outgoing = httpx.Request(
            original.method,
            original.url,
            headers=headers,
            content=original.content or None,
            extensions=dict(original.extensions),
        )
        return outgoing, token

    async def _on_unauthorized(
        self,
        envelope: RequestEnvelope,
        response: httpx.Response,
        sent_token: Optional[str],
    ) -> httpx.Response:
        error = httpx.HTTPStatusError(
            f"401 Unauthorized for url '{response.request.url}'",
            request=response.request,
            response=response,
        )
        path = envelope.request.url.path

        if is_refresh_exempt(path):
            raise error

        if envelope.retried:
            logger.warning("Request to %s still unauthorized after refresh", path)
            had_session = self._store.has_session()
            self._store.clear_all()
            self._logout.trigger(had_session)
            raise SessionExpiredError("Session expired") from error

        # The token was rotated while this request was in flight.
        current = self._store.get_access_token()
        if current and current != sent_token and not self._coordinator.is_refreshing:
            logger.debug("Retrying %s with the already refreshed token", path)
            return await self.send(envelope.retry_with(current))

        token = await self._coordinator.acquire_token(envelope, error)
        return await self.send(envelope.retry_with(token))

    async def aclose(self) -> None:
        await self._client.aclose()
