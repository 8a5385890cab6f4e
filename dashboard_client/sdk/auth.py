"""
Auth Flows - Login, 2FA verification, registration and logout.

These calls go to refresh-exempt endpoints: a 401 here means bad
credentials and is raised as ``httpx.HTTPStatusError``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import httpx

from dashboard_client.domain.session import Session
from dashboard_client.exceptions import ApiError, AuthenticationError
from dashboard_client.ports.token_store_port import TokenStorePort
from dashboard_client.sdk import endpoints
from dashboard_client.sdk.pipeline import RequestPipeline
from dashboard_client.sdk.refresh import parse_token_payload

logger = logging.getLogger(__name__)


@dataclass
class TwoFactorChallenge:
    """Login accepted the password but needs a TOTP code."""
    interim_token: str
    message: Optional[str] = None


@dataclass
class LoginResult:
    """A completed login. The session is already stored."""
    session: Session
    user: Dict[str, Any] = field(default_factory=dict)


class AuthFlows:
    """
    Session lifecycle calls.

    Example:
        result = await client.auth.login("admin@example.com", "secret")
        if isinstance(result, TwoFactorChallenge):
            result = await client.auth.verify_2fa(result.interim_token, "123456")
    """

    def __init__(self, pipeline: RequestPipeline, token_store: TokenStorePort):
        self._pipeline = pipeline
        self._store = token_store

    async def login(self, email: str, password: str) -> Union[LoginResult, TwoFactorChallenge]:
        """
        Log in with email and password.

        Returns:
            LoginResult with the stored session, or TwoFactorChallenge when
            the account has 2FA enabled

        Raises:
            httpx.HTTPStatusError: Bad credentials (401) or other HTTP errors
            ApiError: Server answered ``success: false``
        """
        data = await self._pipeline.post(endpoints.AUTH_LOGIN, json={"email": email, "password": password})
        data = data if isinstance(data, dict) else {}

        if data.get("requires2FA"):
            interim_token = data.get("interimToken")
            if not interim_token:
                raise AuthenticationError("Two-factor login did not return an interim token")
            logger.info("Login requires two-factor verification")
            return TwoFactorChallenge(interim_token=interim_token, message=data.get("message"))

        return self._complete(data, "Login")

    async def verify_2fa(self, interim_token: str, code: str) -> LoginResult:
        """
        Finish a two-factor login.

        Args:
            interim_token: Token from the TwoFactorChallenge
            code: TOTP or backup code
        """
        data = await self._pipeline.post(
            endpoints.AUTH_VERIFY_2FA,
            json={"token": code},
            headers={"Authorization": f"Bearer {interim_token}"},
        )
        return self._complete(data if isinstance(data, dict) else {}, "Two-factor verification")

    async def register(self, email: str, password: str, name: str, **extra: Any) -> Optional[LoginResult]:
        """
        Create an account.

        Returns:
            LoginResult when the server signs the new user in directly,
            None when it only acknowledges the registration (e.g. pending
            email verification)
        """
        body = {"email": email, "password": password, "name": name}
        body.update(extra)
        data = await self._pipeline.post(endpoints.AUTH_REGISTER, json=body)
        data = data if isinstance(data, dict) else {}

        if parse_token_payload({"data": data}) is None:
            logger.info("Registration accepted without tokens")
            return None
        return self._complete(data, "Registration")

    async def logout(self) -> None:
        """
        Tell the server, then forget the session locally.

        The local session is always cleared, even when the server call fails.
        """
        try:
            if self._store.has_session():
                await self._pipeline.post(endpoints.AUTH_LOGOUT)
        except (httpx.HTTPError, AuthenticationError, ApiError) as e:
            logger.warning("Server logout failed: %s", e)
        finally:
            self._store.clear_all()

    def _complete(self, data: Dict[str, Any], flow: str) -> LoginResult:
        session = parse_token_payload({"data": data})
        if session is None:
            raise AuthenticationError(f"{flow} did not return an access token")

        self._store.save_session(session)
        logger.info("%s succeeded", flow)
        user = data.get("user")
        return LoginResult(session=session, user=user if isinstance(user, dict) else {})
