"""
Backend Mode Selector - Direct document store or REST API.
"""

from enum import Enum
from typing import Optional

# Static-hosting domains where the dashboard runs without its API.
DIRECT_STORE_HOST_SUFFIXES = ("web.app", "firebaseapp.com")


class BackendMode(Enum):
    """Which backend answers the admin services."""
    DIRECT_STORE = "direct_store"
    REST_API = "rest_api"


def resolve_mode(host: str, web_only: Optional[bool] = None) -> BackendMode:
    """
    Choose the backend for a runtime environment.

    Pure function: no state, no I/O. ``web_only`` overrides host detection
    when set.

    Args:
        host: Hostname the dashboard is served from
        web_only: Explicit override from configuration

    Returns:
        BackendMode.DIRECT_STORE on static hosting, BackendMode.REST_API otherwise
    """
    if web_only is not None:
        return BackendMode.DIRECT_STORE if web_only else BackendMode.REST_API

    hostname = (host or "").strip().lower().split(":")[0]
    # whole labels only: "myweb.app" is not static hosting
    if any(
        hostname == suffix or hostname.endswith("." + suffix)
        for suffix in DIRECT_STORE_HOST_SUFFIXES
    ):
        return BackendMode.DIRECT_STORE
    return BackendMode.REST_API
