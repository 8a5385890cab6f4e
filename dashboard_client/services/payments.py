"""
Payment Service - Payment ledger and the grouped-by-payer view.
"""

from typing import List, Optional

from dashboard_client.domain.pagination import Pagination
from dashboard_client.domain.records import (
    AdminLicense,
    AdminPayment,
    PaymentDetails,
    PaymentGroup,
    PaymentList,
)
from dashboard_client.ports.payment_port import PaymentBackendPort, PaymentFilters
from dashboard_client.services.aggregation import group_payments_by_user
from dashboard_client.services.base import READ_ERRORS, check_page, log_degraded


class PaymentService:
    """Payments through the active backend."""

    def __init__(self, backend: PaymentBackendPort):
        self._backend = backend

    async def get_payments(
        self,
        page: int = 1,
        page_size: int = 100,
        filters: Optional[PaymentFilters] = None,
    ) -> PaymentList:
        """
        List one page of payments, newest first.

        Returns:
            PaymentList. Empty with zero pagination if the backend could
            not be read.
        """
        check_page(page, page_size)
        try:
            result = await self._backend.list_payments(page, page_size, filters)
        except READ_ERRORS as e:
            log_degraded("List payments", e)
            return PaymentList(payments=[], pagination=Pagination.empty(page, page_size))

        return PaymentList(
            payments=[AdminPayment.from_raw(record) for record in result.records],
            pagination=result.pagination,
        )

    async def get_grouped_payments(
        self,
        page: int = 1,
        page_size: int = 100,
        filters: Optional[PaymentFilters] = None,
    ) -> List[PaymentGroup]:
        """Group one page of payments by payer, largest total first."""
        result = await self.get_payments(page, page_size, filters)
        return group_payments_by_user(result.payments)

    async def get_payment_details(self, payment_id: str) -> PaymentDetails:
        """
        Fetch a payment and the licenses of its payer.

        Raises:
            NotFoundError: If the payment does not exist
        """
        raw = await self._backend.get_payment_details(payment_id)
        payment = AdminPayment.from_raw(raw.get("payment") or {}, payment_id=payment_id)
        licenses = [
            AdminLicense.from_raw(record, user_id=payment.user_id, user_email=payment.user.email)
            for record in raw.get("licenses") or []
        ]
        return PaymentDetails(payment=payment, licenses=licenses)
