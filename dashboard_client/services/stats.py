"""
Stats Service - Dashboard headline numbers and system health.
"""

import logging

from dashboard_client.domain.records import AdminStats, SystemHealth
from dashboard_client.ports.stats_port import StatsBackendPort
from dashboard_client.services.base import READ_ERRORS, log_degraded

logger = logging.getLogger(__name__)


class StatsService:
    """
    Dashboard statistics from whichever backend is active.

    Example:
        stats = await client.stats.get_dashboard_stats()
        print(stats.total_revenue)
    """

    def __init__(self, backend: StatsBackendPort):
        self._backend = backend

    async def get_dashboard_stats(self) -> AdminStats:
        """
        Fetch the headline numbers.

        Returns:
            AdminStats. Zeroed with ``system_health="error"`` if the backend
            could not be read.

        Raises:
            SessionExpiredError: If the session could not be recovered
        """
        try:
            raw = await self._backend.fetch_stats()
        except READ_ERRORS as e:
            log_degraded("Dashboard stats", e)
            return AdminStats.zeroed()
        return AdminStats.from_raw(raw)

    async def get_system_health(self) -> SystemHealth:
        """
        Check the database, email and payment dependencies.

        Returns:
            SystemHealth. Reports an unhealthy database (and disabled
            email/payment checks) if the backend could not be read.
        """
        try:
            raw = await self._backend.fetch_health()
        except READ_ERRORS as e:
            logger.warning("System health check failed: %s", e)
            return SystemHealth.unreachable(str(e))
        return SystemHealth.from_raw(raw)
