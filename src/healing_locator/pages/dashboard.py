"""
Dashboard page shown after a successful login.
"""

from typing import Any, TYPE_CHECKING
import asyncio
import logging

from healing_locator.exceptions import ResolutionFailure
from healing_locator.utils.waits import wait_for_condition, with_timeout

if TYPE_CHECKING:
    from healing_locator.locator import SelfHealingLocator

logger = logging.getLogger(__name__)


class DashboardPage:
    """Page object for the post-login dashboard."""

    def __init__(self, page: Any, locator: "SelfHealingLocator"):
        self.page = page
        self.locator = locator

    async def welcome_heading(self) -> Any:
        return await self.locator.smart_locate(
            "WelcomeHeading",
            role="heading",
            text="Welcome",
            css="h3.user-name-welcome",
        )

    async def user_name(self) -> str:
        """Name from the welcome heading, e.g. 'Welcome Dummy' -> 'Dummy'."""
        heading = await self.welcome_heading()
        text = await self.locator.page.get_text(heading) or ""
        return text.replace("Welcome", "", 1).strip()

    async def is_logged_in(self) -> bool:
        try:
            await self.welcome_heading()
        except ResolutionFailure as e:
            logger.debug(f"Welcome heading not found: {e}")
            return False
        return True

    async def wait_until_logged_in(self, timeout_ms: int = 15000) -> bool:
        """
        Poll for the welcome heading; False if it never shows up.

        timeout_ms bounds the whole wait, including a poll still in flight.
        """
        try:
            await with_timeout(
                wait_for_condition(self.is_logged_in, timeout_ms=timeout_ms, interval_ms=1000),
                timeout_ms / 1000,
                f"Not logged in within {timeout_ms}ms",
            )
        except asyncio.TimeoutError:
            return False
        return True
