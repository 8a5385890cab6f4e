"""
Domain Models - Sessions, normalized admin records and business rules.

No infrastructure dependencies. Domain logic only.
"""

from dashboard_client.domain.session import Session
from dashboard_client.domain.pagination import Pagination, RecordPage, slice_window
from dashboard_client.domain.licensing import LicenseTier, validate_seats
from dashboard_client.domain.records import (
    AdminLicense,
    AdminPayment,
    AdminStats,
    AdminSubscription,
    AdminUser,
    PaymentGroup,
    SystemHealth,
)

__all__ = [
    "Session",
    "Pagination",
    "RecordPage",
    "slice_window",
    "LicenseTier",
    "validate_seats",
    "AdminLicense",
    "AdminPayment",
    "AdminStats",
    "AdminSubscription",
    "AdminUser",
    "PaymentGroup",
    "SystemHealth",
]
