"""
Exceptions raised by the dashboard client.

Auth failures, local validation failures and backend read failures are
kept apart so callers can surface the first two and degrade on the third.
"""

from typing import Dict, Optional


class DashboardClientError(Exception):
    """Base class for all client errors."""
    pass


class ConfigError(DashboardClientError):
    """Raised when client configuration is missing or inconsistent."""
    pass


class AuthenticationError(DashboardClientError):
    """Raised when the server rejects the caller's credentials."""
    pass


class SessionExpiredError(AuthenticationError):
    """
    Terminal authorization failure.

    Raised when a retried request is still unauthorized or when the token
    refresh fails. The stored session has already been cleared when this
    is raised.
    """

    def __init__(self, message: str = "Session expired", status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(DashboardClientError):
    """
    Local business-rule violation.

    Raised before any network call is issued.

    Attributes:
        errors: Field name -> human-readable message
    """

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class BackendError(DashboardClientError):
    """A read or write against the selected backend failed."""
    pass


class NotFoundError(BackendError):
    """The requested document does not exist."""
    pass


class ApiError(DashboardClientError):
    """
    The REST backend answered with ``success: false``.

    Attributes:
        status_code: HTTP status of the response
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
