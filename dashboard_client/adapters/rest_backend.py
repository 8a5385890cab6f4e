"""
REST Backends - Admin data served by the dashboard API.

All calls go through the shared RequestPipeline, so they carry the
bearer token and recover from an expired access token transparently.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from dashboard_client.domain.pagination import Pagination, RecordPage
from dashboard_client.exceptions import NotFoundError
from dashboard_client.ports.license_port import LicenseBackendPort, LicenseFilters
from dashboard_client.ports.payment_port import PaymentBackendPort, PaymentFilters
from dashboard_client.ports.stats_port import StatsBackendPort
from dashboard_client.ports.user_port import UserBackendPort
from dashboard_client.sdk import endpoints
from dashboard_client.sdk.pipeline import RequestPipeline

logger = logging.getLogger(__name__)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _page_of(data: Any, key: str, page: int, limit: int) -> RecordPage:
    data = _as_dict(data)
    records = [r for r in data.get(key) or [] if isinstance(r, dict)]
    return RecordPage(
        records=records,
        pagination=Pagination.from_raw(data.get("pagination"), page, limit, len(records)),
    )


class RestBackend:
    """Shared plumbing for the per-service REST backends."""

    def __init__(self, pipeline: RequestPipeline):
        self._pipeline = pipeline

    async def _get_detail(self, path: str, what: str) -> Dict[str, Any]:
        try:
            return _as_dict(await self._pipeline.get(path))
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise NotFoundError(f"{what} not found") from e
            raise


class RestStatsBackend(RestBackend, StatsBackendPort):

    async def fetch_stats(self) -> Dict[str, Any]:
        data = _as_dict(await self._pipeline.get(endpoints.ADMIN_DASHBOARD_STATS))
        return _as_dict(data.get("stats", data))

    async def fetch_health(self) -> Dict[str, Any]:
        data = _as_dict(await self._pipeline.get(endpoints.ADMIN_SYSTEM_HEALTH))
        return _as_dict(data.get("health", data))


class RestUserBackend(RestBackend, UserBackendPort):

    async def list_users(self, page: int, limit: int) -> RecordPage:
        data = await self._pipeline.get(endpoints.ADMIN_USERS, params={"page": page, "limit": limit})
        return _page_of(data, "users", page, limit)

    async def get_user_details(self, user_id: str) -> Dict[str, Any]:
        data = await self._get_detail(endpoints.admin_user(user_id), "User")
        user = _as_dict(data.get("user"))
        # the API nests subscriptions and licenses inside the user
        subscriptions = data.get("subscriptions") or user.get("subscriptions") or []
        licenses = data.get("licenses") or user.get("licenses") or []
        return {"user": user, "subscriptions": subscriptions, "licenses": licenses}

    async def update_user(self, user_id: str, role: Optional[str] = None, status: Optional[str] = None) -> None:
        body: Dict[str, Any] = {}
        if role:
            body["role"] = role.upper()
        if status:
            body["status"] = status.upper()
        await self._pipeline.put(endpoints.admin_user(user_id), json=body)


class RestPaymentBackend(RestBackend, PaymentBackendPort):

    async def list_payments(self, page: int, limit: int, filters: Optional[PaymentFilters] = None) -> RecordPage:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if filters:
            params.update(filters.to_params())
        data = await self._pipeline.get(endpoints.ADMIN_PAYMENTS, params=params)
        return _page_of(data, "payments", page, limit)

    async def get_payment_details(self, payment_id: str) -> Dict[str, Any]:
        data = await self._get_detail(endpoints.admin_payment(payment_id), "Payment")
        payment = _as_dict(data.get("payment"))
        payment.setdefault("id", payment_id)
        return {"payment": payment, "licenses": data.get("licenses") or []}


class RestLicenseBackend(RestBackend, LicenseBackendPort):

    async def list_licenses(self, page: int, limit: int, filters: Optional[LicenseFilters] = None) -> RecordPage:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if filters:
            params.update(filters.to_params())
        data = await self._pipeline.get(endpoints.ADMIN_LICENSES, params=params)
        return _page_of(data, "licenses", page, limit)

    async def update_seats(self, subscription_id: str, seats: int) -> None:
        await self._pipeline.put(endpoints.subscription(subscription_id), json={"seats": seats})

    async def create_licenses(self, user_id: str, subscription_id: str, tier: str, seats: int) -> List[str]:
        data = _as_dict(await self._pipeline.post(
            endpoints.ADMIN_CREATE_LICENSE,
            json={"userId": user_id, "subscriptionId": subscription_id, "tier": tier, "seats": seats},
        ))
        created = data.get("licenses") or data.get("licenseIds") or []
        return [str(item.get("id")) if isinstance(item, dict) else str(item) for item in created]

    async def revoke_license(self, license_id: str) -> None:
        try:
            await self._pipeline.post(endpoints.admin_revoke_license(license_id))
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise NotFoundError(f"License not found: {license_id}") from e
            raise
