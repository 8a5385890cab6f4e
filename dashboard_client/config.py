"""
Client configuration.

Values come from constructor arguments or from prefixed environment
variables (``DASHBOARD_API_BASE_URL``, ``DASHBOARD_HOST``, ...).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dashboard_client.exceptions import ConfigError

TOKEN_STORES = ("file", "redis", "memory")


def _str_to_bool(value: Optional[str]) -> Optional[bool]:
    if value is None or value == "":
        return None
    return value.lower() in ("1", "true", "yes", "y", "on")


@dataclass
class ClientConfig:
    """
    Settings for one dashboard client instance.

    Attributes:
        api_base_url: Base URL of the REST API (endpoints are relative to it)
        host: Hostname the dashboard is served from (drives backend mode)
        web_only: Force direct-store mode on (True) or off (False)
        timeout: HTTP timeout in seconds
        logout_delay: Seconds to wait before invoking the logout callback
        direct_store_window: Max documents fetched per direct-store list read
        token_store: "file", "redis" or "memory"
        token_file: Path of the JSON token file
        redis_url: Redis URL for the redis token store
        redis_prefix: Key prefix for the redis token store
        firestore_project: Google Cloud project of the document store
        firestore_credentials_file: Service account JSON for the document store
    """
    api_base_url: str = "http://localhost:8080/api"
    host: str = "localhost"
    web_only: Optional[bool] = None
    timeout: float = 15.0
    logout_delay: float = 0.1
    direct_store_window: int = 500
    token_store: str = "file"
    token_file: str = "~/.dashboard_client/tokens.json"
    redis_url: str = "redis://localhost:6379/0"
    redis_prefix: str = "dashboard:session:"
    firestore_project: Optional[str] = None
    firestore_credentials_file: Optional[str] = None

    @classmethod
    def from_env(cls, prefix: str = "DASHBOARD_") -> "ClientConfig":
        """
        Build a config from environment variables.

        Each field maps to ``<prefix><FIELD_NAME>`` in upper case. Unset
        variables keep the field default.
        """
        defaults = cls()

        def env(name: str) -> Optional[str]:
            return os.environ.get(f"{prefix}{name.upper()}")

        try:
            config = cls(
                api_base_url=env("api_base_url") or defaults.api_base_url,
                host=env("host") or defaults.host,
                web_only=_str_to_bool(env("web_only")),
                timeout=float(env("timeout") or defaults.timeout),
                logout_delay=float(env("logout_delay") or defaults.logout_delay),
                direct_store_window=int(env("direct_store_window") or defaults.direct_store_window),
                token_store=(env("token_store") or defaults.token_store).lower(),
                token_file=env("token_file") or defaults.token_file,
                redis_url=env("redis_url") or defaults.redis_url,
                redis_prefix=env("redis_prefix") or defaults.redis_prefix,
                firestore_project=env("firestore_project") or os.environ.get("GOOGLE_PROJECT_ID"),
                firestore_credentials_file=(
                    env("firestore_credentials_file")
                    or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
                ),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

        config.validate()
        return config

    def validate(self) -> None:
        """Raise ConfigError if settings are unusable."""
        if not self.api_base_url:
            raise ConfigError("api_base_url is required")
        if self.token_store not in TOKEN_STORES:
            raise ConfigError(
                f"token_store must be one of {', '.join(TOKEN_STORES)}, got {self.token_store!r}"
            )
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive")
        if self.logout_delay < 0:
            raise ConfigError("logout_delay must not be negative")
        if self.direct_store_window < 1:
            raise ConfigError("direct_store_window must be at least 1")
