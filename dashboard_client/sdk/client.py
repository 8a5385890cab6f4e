"""
Dashboard Client - High-level SDK for the admin dashboard.

Wires the token store, request pipeline, refresh coordinator and the
backend selected for the runtime environment behind one object.
"""

import logging
from typing import Optional

import httpx

from dashboard_client.adapters.file_token_store import FileTokenStore
from dashboard_client.adapters.firestore_backend import (
    FirestoreLicenseBackend,
    FirestorePaymentBackend,
    FirestoreStatsBackend,
    FirestoreUserBackend,
)
from dashboard_client.adapters.memory_token_store import MemoryTokenStore
from dashboard_client.adapters.redis_token_store import RedisTokenStore
from dashboard_client.adapters.rest_backend import (
    RestLicenseBackend,
    RestPaymentBackend,
    RestStatsBackend,
    RestUserBackend,
)
from dashboard_client.config import ClientConfig
from dashboard_client.ports.token_store_port import TokenStorePort
from dashboard_client.sdk.auth import AuthFlows
from dashboard_client.sdk.logout import LogoutCallback, TerminalLogout
from dashboard_client.sdk.mode import BackendMode, resolve_mode
from dashboard_client.sdk.pipeline import RequestPipeline
from dashboard_client.sdk.refresh import HttpRefreshCall, RefreshCoordinator
from dashboard_client.services.licenses import LicenseService
from dashboard_client.services.payments import PaymentService
from dashboard_client.services.stats import StatsService
from dashboard_client.services.users import UserService

logger = logging.getLogger(__name__)


def build_token_store(config: ClientConfig) -> TokenStorePort:
    """Create the token store named by ``config.token_store``."""
    if config.token_store == "redis":
        return RedisTokenStore(redis_url=config.redis_url, prefix=config.redis_prefix)
    if config.token_store == "memory":
        return MemoryTokenStore()
    return FileTokenStore(config.token_file)


def build_firestore_client(config: ClientConfig):
    """
    Create a Firestore AsyncClient for direct-store mode.

    Uses the service account file when one is configured, application
    default credentials otherwise.
    """
    from google.cloud import firestore
    from google.oauth2 import service_account

    credentials = None
    if config.firestore_credentials_file:
        credentials = service_account.Credentials.from_service_account_file(config.firestore_credentials_file)
    return firestore.AsyncClient(project=config.firestore_project, credentials=credentials)


class DashboardClient:
    """
    One dashboard session and its admin services.

    Example:
        from dashboard_client import ClientConfig, DashboardClient

        async with DashboardClient(ClientConfig.from_env(), on_logout=show_login) as client:
            await client.auth.login("admin@example.com", "secret")
            stats = await client.stats.get_dashboard_stats()
            groups = await client.payments.get_grouped_payments(page_size=10)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        token_store: Optional[TokenStorePort] = None,
        on_logout: Optional[LogoutCallback] = None,
        firestore_client=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client settings (defaults to ClientConfig())
            token_store: Token store, built from config if omitted
            on_logout: Called once when the session is irrecoverably lost
            firestore_client: Firestore AsyncClient for direct-store mode,
                built from config if omitted and needed
            transport: httpx transport for both the API client and the
                refresh call (tests pass httpx.MockTransport)
        """
        self.config = config or ClientConfig()
        self.config.validate()

        self.token_store = token_store or build_token_store(self.config)
        self.terminal_logout = TerminalLogout(on_logout=on_logout, delay=self.config.logout_delay)

        self._refresh_call = HttpRefreshCall(self.config.api_base_url, timeout=self.config.timeout, transport=transport)
        self.coordinator = RefreshCoordinator(self.token_store, self._refresh_call, self.terminal_logout)
        self.pipeline = RequestPipeline(
            httpx.AsyncClient(
                base_url=self.config.api_base_url.rstrip("/") + "/",
                timeout=self.config.timeout,
                headers={"Content-Type": "application/json"},
                transport=transport,
            ),
            self.token_store,
            self.coordinator,
            self.terminal_logout,
        )
        self.auth = AuthFlows(self.pipeline, self.token_store)

        self.mode = resolve_mode(self.config.host, self.config.web_only)
        logger.info("Dashboard client using %s backend", self.mode.value)

        if self.mode is BackendMode.DIRECT_STORE:
            db = firestore_client if firestore_client is not None else build_firestore_client(self.config)
            window = self.config.direct_store_window
            self.stats = StatsService(FirestoreStatsBackend(db, window))
            self.users = UserService(FirestoreUserBackend(db, window))
            self.payments = PaymentService(FirestorePaymentBackend(db, window))
            self.licenses = LicenseService(FirestoreLicenseBackend(db, window))
        else:
            self.stats = StatsService(RestStatsBackend(self.pipeline))
            self.users = UserService(RestUserBackend(self.pipeline))
            self.payments = PaymentService(RestPaymentBackend(self.pipeline))
            self.licenses = LicenseService(RestLicenseBackend(self.pipeline))

    @classmethod
    def from_env(cls, prefix: str = "DASHBOARD_", **kwargs) -> "DashboardClient":
        """Build a client from ``<prefix>*`` environment variables."""
        return cls(ClientConfig.from_env(prefix), **kwargs)

    @property
    def is_authenticated(self) -> bool:
        return self.token_store.get_access_token() is not None

    async def aclose(self) -> None:
        """Close the HTTP clients."""
        await self.pipeline.aclose()
        await self._refresh_call.aclose()

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
