"""
Memory Token Store - In-memory token storage (testing only).
"""

from typing import Dict, Optional

from dashboard_client.ports.token_store_port import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    TokenStorePort,
)


class MemoryTokenStore(TokenStorePort):
    """
    In-memory token storage.

    WARNING: Only for testing. Tokens are lost on restart.
    """

    def __init__(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None):
        """Initialize storage, optionally pre-seeded with a session."""
        self._tokens: Dict[str, str] = {}
        if access_token:
            self._tokens[ACCESS_TOKEN_KEY] = access_token
        if refresh_token:
            self._tokens[REFRESH_TOKEN_KEY] = refresh_token

    def get_access_token(self) -> Optional[str]:
        return self._tokens.get(ACCESS_TOKEN_KEY)

    def set_access_token(self, token: str) -> None:
        self._tokens[ACCESS_TOKEN_KEY] = token

    def get_refresh_token(self) -> Optional[str]:
        return self._tokens.get(REFRESH_TOKEN_KEY)

    def set_refresh_token(self, token: str) -> None:
        self._tokens[REFRESH_TOKEN_KEY] = token

    def clear_all(self) -> None:
        self._tokens.clear()
