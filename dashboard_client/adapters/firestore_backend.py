"""
Firestore Backends - Admin data read straight from the document store.

Used when the dashboard runs on static hosting without its API. Every
list read fetches a bounded window ordered by ``createdAt`` descending and
pages through it locally with ``slice_window``.

Requires: pip install google-cloud-firestore
"""

import functools
import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from dashboard_client.domain.pagination import RecordPage, slice_window
from dashboard_client.domain.records import parse_timestamp
from dashboard_client.exceptions import BackendError, NotFoundError
from dashboard_client.ports.license_port import LicenseBackendPort, LicenseFilters
from dashboard_client.ports.payment_port import PaymentBackendPort, PaymentFilters
from dashboard_client.ports.stats_port import StatsBackendPort
from dashboard_client.ports.user_port import UserBackendPort

logger = logging.getLogger(__name__)

USERS = "users"
SUBSCRIPTIONS = "subscriptions"
PAYMENTS = "payments"
INVOICES = "invoices"
LICENSES = "licenses"

RECENT_PAYMENTS_LIMIT = 10

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

# database round-trip thresholds (ms)
HEALTHY_BELOW_MS = 1000
DEGRADED_BELOW_MS = 3000


def store_errors(operation: str):
    """Translate Firestore client errors into BackendError."""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except NotFound as e:
                raise NotFoundError(f"{operation}: document not found") from e
            except GoogleAPIError as e:
                raise BackendError(f"{operation} failed: {e}") from e
        return wrapper
    return decorator


def _payer_name(user: Dict[str, Any]) -> str:
    return user.get("name") or f"{user.get('firstName') or ''} {user.get('lastName') or ''}".strip()


class FirestoreBackend:
    """Shared query helpers for the per-service Firestore backends."""

    def __init__(self, db, window: int = 500):
        """
        Args:
            db: google.cloud.firestore.AsyncClient
            window: Max documents fetched per list read
        """
        self._db = db
        self._window = window

    def _collection(self, name: str):
        return self._db.collection(name)

    async def _documents(self, query) -> List[Dict[str, Any]]:
        snapshots = await query.get()
        return [dict(snapshot.to_dict() or {}, id=snapshot.id) for snapshot in snapshots]

    async def _where(self, collection: str, **equals: Any) -> List[Dict[str, Any]]:
        query = self._collection(collection)
        for field_path, value in equals.items():
            query = query.where(filter=FieldFilter(field_path, "==", value))
        return await self._documents(query)

    async def _newest_window(self, collection: str, **equals: Any) -> List[Dict[str, Any]]:
        query = self._collection(collection)
        for field_path, value in equals.items():
            query = query.where(filter=FieldFilter(field_path, "==", value))
        query = query.order_by("createdAt", direction=firestore.Query.DESCENDING).limit(self._window)
        return await self._documents(query)

    async def _get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        snapshot = await self._collection(collection).document(document_id).get()
        if not snapshot.exists:
            return None
        return dict(snapshot.to_dict() or {}, id=snapshot.id)

    async def _payer(self, user_id: Optional[str], cache: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        """Look up ``{email, name}`` of a payer, once per user id per call."""
        if not user_id:
            return {}
        if user_id not in cache:
            user = await self._get(USERS, user_id)
            cache[user_id] = {"email": user.get("email"), "name": _payer_name(user)} if user else {}
        return cache[user_id]


class FirestoreStatsBackend(FirestoreBackend, StatsBackendPort):
    """Dashboard statistics computed from the collections."""

    @store_errors("Dashboard stats")
    async def fetch_stats(self) -> Dict[str, Any]:
        users = await self._collection(USERS).count().get()
        active = await self._collection(SUBSCRIPTIONS).where(
            filter=FieldFilter("status", "==", "ACTIVE")
        ).count().get()

        return {
            "totalUsers": users[0][0].value,
            "activeSubscriptions": active[0][0].value,
            "totalRevenue": await self._total_revenue(),
            "pendingApprovals": 0,
            "systemHealth": "healthy",
            "recentPayments": await self._recent_payments(),
        }

    async def _recent_payments(self) -> List[Dict[str, Any]]:
        recent: List[Dict[str, Any]] = []
        newest_succeeded = (
            self._collection(PAYMENTS)
            .where(filter=FieldFilter("status", "==", "succeeded"))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
            .limit(RECENT_PAYMENTS_LIMIT)
        )
        try:
            recent.extend(await self._documents(newest_succeeded))
        except GoogleAPIError as e:
            logger.warning("Could not read recent payments: %s", e)

        newest_invoices = (
            self._collection(INVOICES)
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
            .limit(RECENT_PAYMENTS_LIMIT)
        )
        try:
            recent.extend(await self._documents(newest_invoices))
        except GoogleAPIError as e:
            logger.warning("Could not read recent invoices: %s", e)

        recent.sort(key=lambda doc: parse_timestamp(doc.get("createdAt")) or _EPOCH, reverse=True)
        return recent[:RECENT_PAYMENTS_LIMIT]

    async def _total_revenue(self) -> float:
        """
        Sum every succeeded payment.

        Succeeded invoices are summed instead only when the payments
        collection cannot be read, so the two never add up together.
        """
        try:
            payments = await self._where(PAYMENTS, status="succeeded")
            return _sum_amounts(payments)
        except GoogleAPIError as e:
            logger.warning("Could not read payments for revenue, falling back to invoices: %s", e)

        try:
            invoices = await self._where(INVOICES, status="succeeded")
        except GoogleAPIError as e:
            logger.warning("Could not read invoices for revenue either: %s", e)
            return 0.0
        return _sum_amounts(invoices)

    async def fetch_health(self) -> Dict[str, Any]:
        checked_at = datetime.now(timezone.utc).isoformat()
        started = time.monotonic()
        try:
            await self._collection(USERS).limit(1).get()
        except GoogleAPIError as e:
            raise BackendError(f"Database health check failed: {e}") from e
        elapsed_ms = int((time.monotonic() - started) * 1000)

        if elapsed_ms < HEALTHY_BELOW_MS:
            database_status = "healthy"
        elif elapsed_ms < DEGRADED_BELOW_MS:
            database_status = "degraded"
        else:
            database_status = "unhealthy"

        return {
            "checkedAt": checked_at,
            "database": {
                "status": database_status,
                "responseTimeMs": elapsed_ms,
                "message": f"Database responding in {elapsed_ms}ms",
            },
            "email": {
                "status": "healthy",
                "message": "Email service status unknown without the API",
            },
            "payment": {
                "status": "healthy",
                "message": "Payment service status unknown without the API",
            },
        }


def _sum_amounts(documents: List[Dict[str, Any]]) -> float:
    total = 0.0
    for document in documents:
        amount = document.get("amount")
        if isinstance(amount, (int, float)) and not isinstance(amount, bool):
            total += amount
    return total


class FirestoreUserBackend(FirestoreBackend, UserBackendPort):
    """User roster from the ``users`` collection."""

    @store_errors("List users")
    async def list_users(self, page: int, limit: int) -> RecordPage:
        result = slice_window(await self._newest_window(USERS), page, limit)
        for user in result.records:
            user["subscriptions"] = await self._where(SUBSCRIPTIONS, userId=user["id"], status="ACTIVE")
        return result

    @store_errors("User details")
    async def get_user_details(self, user_id: str) -> Dict[str, Any]:
        user = await self._get(USERS, user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")

        subscriptions = await self._where(SUBSCRIPTIONS, userId=user_id)
        licenses = await self._where(LICENSES, userId=user_id)
        user["subscriptions"] = subscriptions
        return {"user": user, "subscriptions": subscriptions, "licenses": licenses}

    @store_errors("Update user")
    async def update_user(self, user_id: str, role: Optional[str] = None, status: Optional[str] = None) -> None:
        updates: Dict[str, Any] = {"updatedAt": firestore.SERVER_TIMESTAMP}
        if role:
            updates["role"] = role.upper()
        if status:
            updates["status"] = status.lower()
        await self._collection(USERS).document(user_id).update(updates)
        logger.info("Updated user %s (%s)", user_id, ", ".join(sorted(k for k in updates if k != "updatedAt")))


class FirestorePaymentBackend(FirestoreBackend, PaymentBackendPort):
    """Payment ledger from the ``payments`` collection."""

    @store_errors("List payments")
    async def list_payments(self, page: int, limit: int, filters: Optional[PaymentFilters] = None) -> RecordPage:
        filters = filters or PaymentFilters()
        equals = {"status": filters.status} if filters.status else {}
        payments = await self._newest_window(PAYMENTS, **equals)

        payers: Dict[str, Dict[str, Any]] = {}
        for payment in payments:
            payment["user"] = await self._payer(payment.get("userId"), payers)

        return slice_window([p for p in payments if _matches(p, filters)], page, limit)

    @store_errors("Payment details")
    async def get_payment_details(self, payment_id: str) -> Dict[str, Any]:
        payment = await self._get(PAYMENTS, payment_id)
        if payment is None:
            raise NotFoundError(f"Payment not found: {payment_id}")

        payment["user"] = await self._payer(payment.get("userId"), {})
        licenses: List[Dict[str, Any]] = []
        if payment.get("userId"):
            licenses = await self._where(LICENSES, userId=payment["userId"])
        return {"payment": payment, "licenses": licenses}


def _matches(payment: Dict[str, Any], filters: PaymentFilters) -> bool:
    """Apply the filters Firestore cannot express on this query."""
    if filters.email:
        email = (payment.get("user") or {}).get("email") or ""
        if filters.email.lower() not in email.lower():
            return False
    if filters.date_from or filters.date_to:
        created = parse_timestamp(payment.get("createdAt"))
        if created is None:
            return False
        if filters.date_from and created < _aware(filters.date_from):
            return False
        if filters.date_to and created > _aware(filters.date_to):
            return False
    return True


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class FirestoreLicenseBackend(FirestoreBackend, LicenseBackendPort):
    """License roster and seat changes on ``licenses``/``subscriptions``."""

    @store_errors("List licenses")
    async def list_licenses(self, page: int, limit: int, filters: Optional[LicenseFilters] = None) -> RecordPage:
        filters = filters or LicenseFilters()
        equals: Dict[str, Any] = {}
        if filters.status:
            equals["status"] = filters.status.lower()
        if filters.tier:
            equals["tier"] = filters.tier.upper()
        if filters.user_id:
            equals["userId"] = filters.user_id

        result = slice_window(await self._newest_window(LICENSES, **equals), page, limit)
        owners: Dict[str, Dict[str, Any]] = {}
        for license_doc in result.records:
            if not license_doc.get("userEmail"):
                owner = await self._payer(license_doc.get("userId"), owners)
                license_doc["userEmail"] = owner.get("email") or ""
        return result

    @store_errors("Update seats")
    async def update_seats(self, subscription_id: str, seats: int) -> None:
        await self._collection(SUBSCRIPTIONS).document(subscription_id).update(
            {"seats": seats, "updatedAt": firestore.SERVER_TIMESTAMP}
        )
        logger.info("Set seats of subscription %s to %d", subscription_id, seats)

    @store_errors("Create licenses")
    async def create_licenses(self, user_id: str, subscription_id: str, tier: str, seats: int) -> List[str]:
        subscription = await self._get(SUBSCRIPTIONS, subscription_id)
        if subscription is None:
            raise NotFoundError(f"Subscription not found: {subscription_id}")
        if str(subscription.get("status", "")).upper() != "ACTIVE":
            raise BackendError("Subscription must be ACTIVE to issue licenses")

        created: List[str] = []
        for _ in range(seats):
            reference = self._collection(LICENSES).document()
            await reference.set({
                "key": secrets.token_urlsafe(24),
                "userId": user_id,
                "subscriptionId": subscription_id,
                "tier": tier,
                "status": "active",
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
            created.append(reference.id)

        logger.info("Issued %d %s license(s) for subscription %s", len(created), tier, subscription_id)
        return created

    @store_errors("Revoke license")
    async def revoke_license(self, license_id: str) -> None:
        await self._collection(LICENSES).document(license_id).update({
            "status": "revoked",
            "revokedAt": firestore.SERVER_TIMESTAMP,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        })
        logger.info("Revoked license %s", license_id)
