"""
License Service - License roster, seat changes and manual issuance.

Seat counts are checked against the tier policy before any backend call.
"""

import logging
from typing import List, Optional

from dashboard_client.domain.licensing import validate_seats
from dashboard_client.domain.pagination import Pagination
from dashboard_client.domain.records import AdminLicense, LicenseList
from dashboard_client.exceptions import ValidationError
from dashboard_client.ports.license_port import LicenseBackendPort, LicenseFilters
from dashboard_client.services.base import READ_ERRORS, check_page, log_degraded

logger = logging.getLogger(__name__)


class LicenseService:
    """Licenses through the active backend."""

    def __init__(self, backend: LicenseBackendPort):
        self._backend = backend

    async def get_licenses(
        self,
        page: int = 1,
        page_size: int = 100,
        filters: Optional[LicenseFilters] = None,
    ) -> LicenseList:
        """
        List one page of licenses, newest first.

        Returns:
            LicenseList. Empty with zero pagination if the backend could
            not be read.
        """
        check_page(page, page_size)
        try:
            result = await self._backend.list_licenses(page, page_size, filters)
        except READ_ERRORS as e:
            log_degraded("List licenses", e)
            return LicenseList(licenses=[], pagination=Pagination.empty(page, page_size))

        return LicenseList(
            licenses=[AdminLicense.from_raw(record) for record in result.records],
            pagination=result.pagination,
        )

    async def assign_seats(self, subscription_id: str, tier: str, seats: int) -> None:
        """
        Change the seat count of a subscription.

        Args:
            subscription_id: Subscription to update
            tier: Tier of the subscription (BASIC, PRO, ENTERPRISE)
            seats: Requested seat count

        Raises:
            ValidationError: If the count breaks the tier policy
        """
        if not subscription_id:
            raise ValidationError("No subscription selected", {"subscription_id": "No subscription selected"})
        parsed, seats = validate_seats(tier, seats)

        await self._backend.update_seats(subscription_id, seats)
        logger.info("Assigned %d seat(s) to %s subscription %s", seats, parsed.value, subscription_id)

    async def create_licenses(self, user_id: str, subscription_id: str, tier: str, seats: int) -> List[str]:
        """
        Issue licenses for a user's subscription without a payment.

        Returns:
            IDs of the created licenses, when the backend reports them

        Raises:
            ValidationError: If user or subscription is missing, or the
                count breaks the tier policy
        """
        errors = {}
        if not user_id:
            errors["user_id"] = "Select a user"
        if not subscription_id:
            errors["subscription_id"] = "Select a subscription"
        if errors:
            raise ValidationError("User and subscription are required", errors)
        parsed, seats = validate_seats(tier, seats)

        return await self._backend.create_licenses(user_id, subscription_id, parsed.value, seats)

    async def revoke_license(self, license_id: str) -> None:
        """
        Raises:
            NotFoundError: If the license does not exist
        """
        if not license_id:
            raise ValidationError("License is required", {"license_id": "License is required"})
        await self._backend.revoke_license(license_id)
