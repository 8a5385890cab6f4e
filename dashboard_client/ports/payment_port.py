"""
Payment Backend Port - Payment ledger.

Implementations:
- FirestorePaymentBackend: payments collection + payer lookup
- RestPaymentBackend: admin/payments endpoints
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from dashboard_client.domain.pagination import RecordPage


@dataclass
class PaymentFilters:
    """
    Ledger filters.

    ``status`` is matched exactly, ``email`` is a case-insensitive
    substring of the payer email, ``date_from``/``date_to`` bound the
    creation time inclusively.
    """
    status: Optional[str] = None
    email: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    def to_params(self) -> Dict[str, str]:
        """Query parameters understood by the admin API."""
        params = {}
        if self.status:
            params["status"] = self.status
        if self.email:
            params["email"] = self.email
        if self.date_from:
            params["from"] = self.date_from.isoformat()
        if self.date_to:
            params["to"] = self.date_to.isoformat()
        return params


class PaymentBackendPort(ABC):
    """Port: Read payments."""

    @abstractmethod
    async def list_payments(
        self,
        page: int,
        limit: int,
        filters: Optional[PaymentFilters] = None,
    ) -> RecordPage:
        """
        List one page of payments, newest first.

        Each raw payment carries a ``user`` object with the payer's
        ``email`` and ``name`` when known.
        """
        pass

    @abstractmethod
    async def get_payment_details(self, payment_id: str) -> Dict[str, Any]:
        """
        Fetch one payment and the licenses of its payer.

        Returns:
            Dict with ``payment`` and ``licenses`` (raw)

        Raises:
            NotFoundError: If the payment does not exist
        """
        pass
