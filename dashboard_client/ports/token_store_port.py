"""
Token Store Port - Interface for persisting the session's token pair.

Implementations:
- FileTokenStore: JSON file (durable across restarts)
- RedisTokenStore: Redis keys under a prefix
- MemoryTokenStore: In-memory (testing only)
"""

from abc import ABC, abstractmethod
from typing import Optional

from dashboard_client.domain.session import Session

ACCESS_TOKEN_KEY = "auth_token"
REFRESH_TOKEN_KEY = "refresh_token"


class TokenStorePort(ABC):
    """
    Port: Store and retrieve the access and refresh tokens.

    Pure storage. No validation of token contents. The pair is cleared
    together, never one token alone.
    """

    @abstractmethod
    def get_access_token(self) -> Optional[str]:
        """Return the current access token, or None."""
        pass

    @abstractmethod
    def set_access_token(self, token: str) -> None:
        """Replace the current access token."""
        pass

    @abstractmethod
    def get_refresh_token(self) -> Optional[str]:
        """Return the stored refresh token, or None."""
        pass

    @abstractmethod
    def set_refresh_token(self, token: str) -> None:
        """Replace the stored refresh token."""
        pass

    @abstractmethod
    def clear_all(self) -> None:
        """Remove both tokens."""
        pass

    def has_session(self) -> bool:
        """True if there is anything to clear."""
        return self.get_access_token() is not None or self.get_refresh_token() is not None

    def get_session(self) -> Optional[Session]:
        """
        Build a Session from the stored tokens.

        Returns:
            Session if an access token is stored, None otherwise
        """
        access_token = self.get_access_token()
        if not access_token:
            return None
        return Session.from_tokens(access_token, self.get_refresh_token())

    def save_session(self, session: Session) -> None:
        """Store both tokens of a session."""
        self.set_access_token(session.access_token)
        if session.refresh_token:
            self.set_refresh_token(session.refresh_token)
