"""
Stats Backend Port - Dashboard statistics and system health.

Implementations:
- FirestoreStatsBackend: computed from the document store
- RestStatsBackend: read from the admin API
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class StatsBackendPort(ABC):
    """Port: Raw dashboard statistics and dependency health."""

    @abstractmethod
    async def fetch_stats(self) -> Dict[str, Any]:
        """
        Fetch raw dashboard statistics.

        Returns:
            Dict with ``totalUsers``, ``activeSubscriptions``,
            ``totalRevenue``, ``pendingApprovals``, ``systemHealth`` and
            ``recentPayments`` (any of which may be missing)

        Raises:
            BackendError: If the backend could not be read
        """
        pass

    @abstractmethod
    async def fetch_health(self) -> Dict[str, Any]:
        """
        Fetch raw system health.

        Returns:
            Dict with ``overall``, ``checkedAt``, ``database``, ``email``
            and ``payment`` entries

        Raises:
            BackendError: If the backend could not be read
        """
        pass
