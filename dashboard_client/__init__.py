"""
Dashboard Client - Admin dashboard session layer and data access

Hexagonal architecture: one authenticated request pipeline with
single-flight token refresh, and admin services that read either the
document store directly or the REST API.

Usage:
    from dashboard_client import ClientConfig, DashboardClient

    client = DashboardClient(ClientConfig(api_base_url="https://api.example.com/api"))

    # Authenticate
    await client.auth.login("admin@example.com", "secret")

    # Read
    users = await client.users.get_users(page=1, page_size=25)
"""

__version__ = "0.1.0"

from dashboard_client.config import ClientConfig
from dashboard_client.sdk.client import DashboardClient
from dashboard_client.domain.session import Session
from dashboard_client.exceptions import (
    DashboardClientError,
    SessionExpiredError,
    ValidationError,
)

__all__ = [
    "ClientConfig",
    "DashboardClient",
    "Session",
    "DashboardClientError",
    "SessionExpiredError",
    "ValidationError",
]
