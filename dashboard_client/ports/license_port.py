"""
License Backend Port - License roster and seat changes.

Implementations:
- FirestoreLicenseBackend: licenses/subscriptions collections
- RestLicenseBackend: admin/licenses and subscriptions endpoints

Seat counts reaching this port have already passed the tier policy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from dashboard_client.domain.pagination import RecordPage


@dataclass
class LicenseFilters:
    """Roster filters (exact match, case-insensitive)."""
    status: Optional[str] = None
    tier: Optional[str] = None
    user_id: Optional[str] = None

    def to_params(self) -> Dict[str, str]:
        params = {}
        if self.status:
            params["status"] = self.status
        if self.tier:
            params["tier"] = self.tier
        if self.user_id:
            params["userId"] = self.user_id
        return params


class LicenseBackendPort(ABC):
    """Port: Read licenses and apply seat/licence mutations."""

    @abstractmethod
    async def list_licenses(
        self,
        page: int,
        limit: int,
        filters: Optional[LicenseFilters] = None,
    ) -> RecordPage:
        """List one page of licenses, newest first."""
        pass

    @abstractmethod
    async def update_seats(self, subscription_id: str, seats: int) -> None:
        """
        Set the seat count of a subscription.

        Raises:
            NotFoundError: If the subscription does not exist
        """
        pass

    @abstractmethod
    async def create_licenses(
        self,
        user_id: str,
        subscription_id: str,
        tier: str,
        seats: int,
    ) -> List[str]:
        """
        Issue ``seats`` licenses for a user's subscription.

        Returns:
            IDs of the created licenses (may be empty if the backend does
            not report them)
        """
        pass

    @abstractmethod
    async def revoke_license(self, license_id: str) -> None:
        """
        Revoke a license.

        Raises:
            NotFoundError: If the license does not exist
        """
        pass
