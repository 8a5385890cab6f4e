"""
Normalized admin records.

Both backends hand raw documents to the ``from_raw`` constructors below,
so callers never branch on where a record came from. Optional fields are
defaulted and status/role/tier values are case-normalized here.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dashboard_client.domain.pagination import Pagination

HEALTH_ORDER = ["healthy", "disabled", "degraded", "unhealthy"]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Coerce a timestamp from either backend into an aware UTC datetime.

    Accepts datetimes (Firestore returns a datetime subclass), ISO-8601
    strings, epoch seconds or milliseconds, and serialized Firestore
    timestamps (``{"_seconds": ...}`` or ``{"seconds": ...}``).

    Returns:
        Parsed datetime, or None if the value is missing or unreadable
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return _from_epoch(value / 1000 if value > 1e12 else value)

    if isinstance(value, dict):
        seconds = value.get("_seconds", value.get("seconds"))
        if isinstance(seconds, (int, float)):
            return _from_epoch(seconds)
        return None

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

    return None


def _from_epoch(seconds: float) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _amount(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _lower(value: Any, default: str) -> str:
    return str(value).lower() if value else default


def _upper(value: Any, default: str) -> str:
    return str(value).upper() if value else default


@dataclass
class AdminSubscription:
    """Subscription attached to a user."""
    id: str
    tier: str = "BASIC"
    status: str = "UNKNOWN"
    seats: int = 0
    user_id: Optional[str] = None

    @classmethod
    def from_raw(cls, data: Dict[str, Any]) -> "AdminSubscription":
        seats = data.get("seats")
        return cls(
            id=str(data.get("id", "")),
            tier=_upper(data.get("tier") or data.get("plan"), "BASIC"),
            status=_upper(data.get("status"), "UNKNOWN"),
            seats=seats if isinstance(seats, int) and not isinstance(seats, bool) else 0,
            user_id=data.get("userId"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tier": self.tier,
            "status": self.status,
            "seats": self.seats,
            "user_id": self.user_id,
        }


@dataclass
class AdminUser:
    """User row of the admin roster."""
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    name: str = ""
    role: str = "USER"
    status: str = "active"
    subscription: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    subscriptions: List[AdminSubscription] = field(default_factory=list)

    @classmethod
    def from_raw(cls, data: Dict[str, Any], user_id: Optional[str] = None) -> "AdminUser":
        first = data.get("firstName") or ""
        last = data.get("lastName") or ""
        name = data.get("name") or f"{first} {last}".strip()
        parts = name.split(" ") if name else []

        subscriptions = [AdminSubscription.from_raw(s) for s in data.get("subscriptions") or []]

        return cls(
            id=str(data.get("id") or user_id or ""),
            email=data.get("email") or "",
            first_name=first or (parts[0] if parts else ""),
            last_name=last or " ".join(parts[1:]),
            name=name,
            role=_upper(data.get("role"), "USER"),
            status=_lower(data.get("status"), "active"),
            subscription=subscriptions[0].tier if subscriptions else None,
            last_login=parse_timestamp(
                data.get("lastLoginAt") or data.get("updatedAt") or data.get("createdAt")
            ),
            created_at=parse_timestamp(data.get("createdAt")),
            subscriptions=subscriptions,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "name": self.name,
            "role": self.role,
            "status": self.status,
            "subscription": self.subscription,
            "last_login": _iso(self.last_login),
            "created_at": _iso(self.created_at),
            "subscriptions": [s.to_dict() for s in self.subscriptions],
        }


@dataclass
class PaymentPayer:
    """Who paid. Either field may be unknown."""
    email: Optional[str] = None
    name: Optional[str] = None


@dataclass
class AdminPayment:
    """Payment ledger row."""
    id: str
    amount: float = 0.0
    status: str = "unknown"
    created_at: Optional[datetime] = None
    user: PaymentPayer = field(default_factory=PaymentPayer)
    tier: Optional[str] = None
    user_id: Optional[str] = None

    @classmethod
    def from_raw(cls, data: Dict[str, Any], payment_id: Optional[str] = None) -> "AdminPayment":
        payer = data.get("user") or {}
        subscription = data.get("subscription") or {}
        tier = subscription.get("tier") if isinstance(subscription, dict) else None
        return cls(
            id=str(data.get("id") or payment_id or ""),
            amount=_amount(data.get("amount")),
            status=_lower(data.get("status"), "unknown"),
            created_at=parse_timestamp(data.get("createdAt")),
            user=PaymentPayer(email=payer.get("email") or None, name=payer.get("name") or None),
            tier=str(tier).upper() if tier else None,
            user_id=data.get("userId"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "user": {"email": self.user.email, "name": self.user.name},
            "tier": self.tier,
            "user_id": self.user_id,
        }


@dataclass
class AdminLicense:
    """License roster row."""
    id: str
    key: str = ""
    user_id: Optional[str] = None
    user_email: str = ""
    tier: str = "BASIC"
    status: str = "active"
    subscription_id: Optional[str] = None
    assigned_to_email: Optional[str] = None
    activated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    last_used: Optional[datetime] = None

    @classmethod
    def from_raw(
        cls,
        data: Dict[str, Any],
        license_id: Optional[str] = None,
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
    ) -> "AdminLicense":
        created = data.get("createdAt")
        return cls(
            id=str(data.get("id") or license_id or ""),
            key=data.get("key") or "",
            user_id=data.get("userId") or user_id,
            user_email=data.get("userEmail") or user_email or "",
            tier=_upper(data.get("tier") or data.get("type"), "BASIC"),
            status=_lower(data.get("status"), "active"),
            subscription_id=data.get("subscriptionId"),
            assigned_to_email=data.get("assignedToEmail"),
            activated_at=parse_timestamp(data.get("activatedAt") or created),
            expires_at=parse_timestamp(
                data.get("expiresAt") or data.get("currentPeriodEnd") or created
            ),
            last_used=parse_timestamp(data.get("updatedAt") or created),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "user_id": self.user_id,
            "user_email": self.user_email,
            "tier": self.tier,
            "status": self.status,
            "subscription_id": self.subscription_id,
            "assigned_to_email": self.assigned_to_email,
            "activated_at": _iso(self.activated_at),
            "expires_at": _iso(self.expires_at),
            "last_used": _iso(self.last_used),
        }


@dataclass
class AdminStats:
    """Headline numbers of the admin dashboard."""
    total_users: int = 0
    active_subscriptions: int = 0
    total_revenue: float = 0.0
    pending_approvals: int = 0
    system_health: str = "healthy"
    recent_payments: List[AdminPayment] = field(default_factory=list)

    @classmethod
    def from_raw(cls, data: Dict[str, Any]) -> "AdminStats":
        return cls(
            total_users=int(data.get("totalUsers") or 0),
            active_subscriptions=int(data.get("activeSubscriptions") or 0),
            total_revenue=_amount(data.get("totalRevenue")),
            pending_approvals=int(data.get("pendingApprovals") or 0),
            system_health=_lower(data.get("systemHealth"), "healthy"),
            recent_payments=[AdminPayment.from_raw(p) for p in data.get("recentPayments") or []],
        )

    @classmethod
    def zeroed(cls) -> "AdminStats":
        """Stats rendered when no backend answered."""
        return cls(system_health="error")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_users": self.total_users,
            "active_subscriptions": self.active_subscriptions,
            "total_revenue": self.total_revenue,
            "pending_approvals": self.pending_approvals,
            "system_health": self.system_health,
            "recent_payments": [p.to_dict() for p in self.recent_payments],
        }


@dataclass
class ComponentHealth:
    """Health of one dependency."""
    status: str = "healthy"
    response_time_ms: Optional[int] = None
    error: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_raw(cls, data: Optional[Dict[str, Any]]) -> "ComponentHealth":
        data = data or {}
        return cls(
            status=_lower(data.get("status"), "healthy"),
            response_time_ms=data.get("responseTimeMs"),
            error=data.get("error"),
            message=data.get("message"),
        )


def worst_status(*statuses: str) -> str:
    """Pick the most severe of several health statuses."""
    ranked = [s for s in statuses if s in HEALTH_ORDER]
    if not ranked:
        return "healthy"
    worst = max(ranked, key=HEALTH_ORDER.index)
    # disabled components do not drag the overall status down
    return "healthy" if worst == "disabled" else worst


@dataclass
class SystemHealth:
    """Health of the database, email and payment dependencies."""
    overall: str
    checked_at: Optional[datetime]
    database: ComponentHealth
    email: ComponentHealth
    payment: ComponentHealth

    @classmethod
    def from_raw(cls, data: Dict[str, Any]) -> "SystemHealth":
        database = ComponentHealth.from_raw(data.get("database"))
        email = ComponentHealth.from_raw(data.get("email"))
        payment = ComponentHealth.from_raw(data.get("payment"))
        overall = data.get("overall") or data.get("status")
        return cls(
            overall=_lower(overall, worst_status(database.status, email.status, payment.status)),
            checked_at=parse_timestamp(data.get("checkedAt")) or datetime.now(timezone.utc),
            database=database,
            email=email,
            payment=payment,
        )

    @classmethod
    def unreachable(cls, error: str) -> "SystemHealth":
        """Health reported when the database itself could not be read."""
        return cls(
            overall="unhealthy",
            checked_at=datetime.now(timezone.utc),
            database=ComponentHealth(status="unhealthy", error=error),
            email=ComponentHealth(status="disabled", message="Cannot check email service"),
            payment=ComponentHealth(status="disabled", message="Cannot check payment service"),
        )


@dataclass
class UserList:
    users: List[AdminUser]
    pagination: Pagination


@dataclass
class UserDetails:
    user: AdminUser
    subscriptions: List[AdminSubscription]
    licenses: List[AdminLicense]


@dataclass
class PaymentList:
    payments: List[AdminPayment]
    pagination: Pagination


@dataclass
class PaymentDetails:
    payment: AdminPayment
    licenses: List[AdminLicense]


@dataclass
class LicenseList:
    licenses: List[AdminLicense]
    pagination: Pagination


@dataclass
class PaymentGroup:
    """Payments of one payer, as shown in the grouped ledger view."""
    user_email: str
    user_name: str
    payments: List[AdminPayment]
    total_amount: float

    @property
    def payment_count(self) -> int:
        return len(self.payments)
