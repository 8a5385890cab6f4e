"""
User Backend Port - Admin user roster.

Implementations:
- FirestoreUserBackend: users collection + subscriptions/licenses joins
- RestUserBackend: admin/users endpoints
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from dashboard_client.domain.pagination import RecordPage


class UserBackendPort(ABC):
    """Port: Read and update users."""

    @abstractmethod
    async def list_users(self, page: int, limit: int) -> RecordPage:
        """
        List one page of users, newest first.

        Each raw user carries a ``subscriptions`` list of its active
        subscriptions.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            Raw user records and their pagination
        """
        pass

    @abstractmethod
    async def get_user_details(self, user_id: str) -> Dict[str, Any]:
        """
        Fetch one user with all subscriptions and licenses.

        Returns:
            Dict with ``user``, ``subscriptions`` and ``licenses`` (raw)

        Raises:
            NotFoundError: If the user does not exist
        """
        pass

    @abstractmethod
    async def update_user(
        self,
        user_id: str,
        role: Optional[str] = None,
        status: Optional[str] = None,
    ) -> None:
        """
        Update a user's role and/or status.

        Args:
            user_id: User ID
            role: New role (upper-case), or None to keep
            status: New status (lower-case), or None to keep
        """
        pass
