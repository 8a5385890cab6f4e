"""
Ports - Interfaces for token storage and the per-service data backends.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW (document store or REST API).
"""

from dashboard_client.ports.token_store_port import TokenStorePort
from dashboard_client.ports.stats_port import StatsBackendPort
from dashboard_client.ports.user_port import UserBackendPort
from dashboard_client.ports.payment_port import PaymentBackendPort, PaymentFilters
from dashboard_client.ports.license_port import LicenseBackendPort, LicenseFilters

__all__ = [
    # Session storage
    "TokenStorePort",
    # Data backends
    "StatsBackendPort",
    "UserBackendPort",
    "PaymentBackendPort",
    "PaymentFilters",
    "LicenseBackendPort",
    "LicenseFilters",
]
