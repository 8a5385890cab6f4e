"""
User Service - Admin user roster.
"""

import logging
from typing import Optional

from dashboard_client.domain.pagination import Pagination
from dashboard_client.domain.records import (
    AdminLicense,
    AdminSubscription,
    AdminUser,
    UserDetails,
    UserList,
)
from dashboard_client.exceptions import ValidationError
from dashboard_client.ports.user_port import UserBackendPort
from dashboard_client.services.base import READ_ERRORS, check_page, log_degraded

logger = logging.getLogger(__name__)


class UserService:
    """Read and update users through the active backend."""

    def __init__(self, backend: UserBackendPort):
        self._backend = backend

    async def get_users(self, page: int = 1, page_size: int = 100) -> UserList:
        """
        List one page of users, newest first.

        Returns:
            UserList. Empty with zero pagination if the backend could not
            be read.
        """
        check_page(page, page_size)
        try:
            result = await self._backend.list_users(page, page_size)
        except READ_ERRORS as e:
            log_degraded("List users", e)
            return UserList(users=[], pagination=Pagination.empty(page, page_size))

        return UserList(
            users=[AdminUser.from_raw(record) for record in result.records],
            pagination=result.pagination,
        )

    async def get_user_details(self, user_id: str) -> UserDetails:
        """
        Fetch a user with all subscriptions and licenses.

        Raises:
            NotFoundError: If the user does not exist
        """
        raw = await self._backend.get_user_details(user_id)
        raw_subscriptions = raw.get("subscriptions") or []

        user = AdminUser.from_raw(dict(raw.get("user") or {}, subscriptions=raw_subscriptions), user_id=user_id)
        licenses = [
            AdminLicense.from_raw(record, user_id=user_id, user_email=user.email)
            for record in raw.get("licenses") or []
        ]
        return UserDetails(
            user=user,
            subscriptions=[AdminSubscription.from_raw(s) for s in raw_subscriptions],
            licenses=licenses,
        )

    async def update_user(self, user_id: str, role: Optional[str] = None, status: Optional[str] = None) -> None:
        """
        Change a user's role and/or status.

        Raises:
            ValidationError: If neither role nor status is given
        """
        if not user_id:
            raise ValidationError("User is required", {"user_id": "User is required"})
        if not role and not status:
            raise ValidationError("Nothing to update", {"role": "Provide a role or a status"})

        await self._backend.update_user(
            user_id,
            role=role.upper() if role else None,
            status=status.lower() if status else None,
        )
        logger.info("Updated user %s", user_id)
