"""
Services - Admin reads and writes on top of the backend ports.

Normalization, pagination and aggregation happen here, identically for
both backends.
"""

from dashboard_client.services.stats import StatsService
from dashboard_client.services.users import UserService
from dashboard_client.services.payments import PaymentService
from dashboard_client.services.licenses import LicenseService
from dashboard_client.services.aggregation import group_payments_by_user, total_revenue

__all__ = [
    "StatsService",
    "UserService",
    "PaymentService",
    "LicenseService",
    "group_payments_by_user",
    "total_revenue",
]
