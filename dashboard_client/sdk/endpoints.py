"""
REST endpoint paths, relative to the API base URL.
"""

AUTH_LOGIN = "auth/login"
AUTH_VERIFY_2FA = "auth/verify-2fa"
AUTH_REGISTER = "auth/register"
AUTH_REFRESH = "auth/refresh"
AUTH_LOGOUT = "auth/logout"

# A 401 from these means bad credentials, not an expired session.
REFRESH_EXEMPT = (AUTH_LOGIN, AUTH_REGISTER, AUTH_VERIFY_2FA, AUTH_REFRESH)

ADMIN_DASHBOARD_STATS = "admin/dashboard-stats"
ADMIN_USERS = "admin/users"
ADMIN_PAYMENTS = "admin/payments"
ADMIN_SYSTEM_HEALTH = "admin/system/health"
ADMIN_LICENSES = "admin/licenses"
ADMIN_CREATE_LICENSE = "admin/licenses/create"


def admin_user(user_id: str) -> str:
    return f"{ADMIN_USERS}/{user_id}"


def admin_payment(payment_id: str) -> str:
    return f"{ADMIN_PAYMENTS}/{payment_id}"


def admin_revoke_license(license_id: str) -> str:
    return f"{ADMIN_LICENSES}/{license_id}/revoke"


def subscription(subscription_id: str) -> str:
    return f"subscriptions/{subscription_id}"


def is_refresh_exempt(path: str) -> bool:
    """True if a 401 on ``path`` must not trigger a token refresh."""
    return any(exempt in path for exempt in REFRESH_EXEMPT)
