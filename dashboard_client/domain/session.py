"""
Session Domain Model - The token pair of the current login.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt


def read_expiry_hint(access_token: str) -> Optional[datetime]:
    """
    Read the ``exp`` claim of a JWT access token without verifying it.

    The server remains the authority on expiry; this is only a hint.

    Returns:
        Expiry as an aware UTC datetime, or None if the token is not a JWT
        or carries no ``exp`` claim
    """
    try:
        claims = jwt.decode(access_token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None

    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(exp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


@dataclass
class Session:
    """
    Session entity - the credentials of one logged-in client.

    Domain rules:
    - exactly one access token is current; a refresh replaces it
    - the refresh token may be rotated by a refresh, or kept
    - tokens are never serialized by to_dict()
    """
    access_token: str
    refresh_token: Optional[str] = None
    expiry_hint: Optional[datetime] = None

    @classmethod
    def from_tokens(cls, access_token: str, refresh_token: Optional[str] = None) -> "Session":
        """Create a session, deriving the expiry hint from the access token."""
        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            expiry_hint=read_expiry_hint(access_token),
        )

    def expires_within(self, seconds: int) -> bool:
        """
        Check whether the hinted expiry falls within the next ``seconds``.

        Sessions without a hint never report as expiring.
        """
        if self.expiry_hint is None:
            return False
        return datetime.now(timezone.utc) + timedelta(seconds=seconds) >= self.expiry_hint

    def rotate(self, access_token: str, refresh_token: Optional[str] = None) -> "Session":
        """Return the session that follows a successful refresh."""
        return Session.from_tokens(access_token, refresh_token or self.refresh_token)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict (tokens redacted)."""
        return {
            "has_refresh_token": self.refresh_token is not None,
            "expiry_hint": self.expiry_hint.isoformat() if self.expiry_hint else None,
        }
