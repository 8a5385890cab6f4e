"""
Terminal Logout - One deferred logout per session expiry.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

LogoutCallback = Callable[[], Any]


class TerminalLogout:
    """
    Fire the logout callback once when a session is irrecoverably lost.

    Several requests can fail during the same transition; triggers that
    arrive while a logout is already scheduled are coalesced into it. The
    callback runs after ``delay`` seconds so callers can finish handling
    their own errors first.

    Example:
        logout = TerminalLogout(on_logout=show_login_screen, delay=0.1)
        logout.trigger(had_session=True)
    """

    def __init__(self, on_logout: Optional[LogoutCallback] = None, delay: float = 0.1):
        """
        Args:
            on_logout: Sync or async callable taking no arguments
            delay: Seconds between the trigger and the callback
        """
        self._on_logout = on_logout
        self._delay = delay
        self._scheduled: Optional[asyncio.Task] = None
        self._fired = 0

    @property
    def fired_count(self) -> int:
        """How many times the callback has run."""
        return self._fired

    @property
    def is_scheduled(self) -> bool:
        return self._scheduled is not None and not self._scheduled.done()

    def trigger(self, had_session: bool) -> bool:
        """
        Request a logout.

        Args:
            had_session: Whether a session existed before it was cleared.
                A client that never logged in is not redirected.

        Returns:
            True if this call scheduled the logout, False if it was ignored
            or coalesced
        """
        if not had_session:
            return False
        if self.is_scheduled:
            logger.debug("Logout already scheduled, coalescing trigger")
            return False

        logger.info("Session expired, logging out in %.2fs", self._delay)
        self._scheduled = asyncio.get_running_loop().create_task(self._run())
        return True

    async def wait(self) -> None:
        """Wait for a scheduled logout to finish."""
        if self._scheduled is not None:
            await self._scheduled

    async def _run(self) -> None:
        await asyncio.sleep(self._delay)
        self._fired += 1
        if self._on_logout is None:
            logger.warning("Session expired and no logout handler is configured")
            return
        try:
            result = self._on_logout()
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Logout handler failed")
