"""
Login page of the portal.

The Saudi ID field and the login button are located through the
self-healing finders so that markup changes on the portal (renamed ids,
new wrappers, reworded buttons) do not break the flow.
"""

from typing import Any, Optional, TYPE_CHECKING
import logging
import re

from healing_locator.engine.queries import StructuralQuery
from healing_locator.exceptions import PageAccessError

if TYPE_CHECKING:
    from healing_locator.config.settings import PortalSettings
    from healing_locator.locator import SelfHealingLocator

logger = logging.getLogger(__name__)


# Checked in order by login_error()
ERROR_SELECTORS = [
    ':has-text("Login failed")',
    ':has-text("Invalid")',
    '.error',
    '.alert-danger',
    '[class*="error"]',
]

ERROR_PROBE_TIMEOUT_MS = 500


class LoginPage:
    """
    Page object for /login.

    Example:
        >>> login = LoginPage(page, locator)
        >>> await login.goto()
        >>> await login.login(settings.portal.saudi_id.get_secret_value())
    """

    def __init__(
        self,
        page: Any,
        locator: "SelfHealingLocator",
        settings: Optional["PortalSettings"] = None,
    ):
        if settings is None:
            from healing_locator.config import get_settings
            settings = get_settings().portal

        self.page = page
        self.locator = locator
        self.settings = settings

    @property
    def url(self) -> str:
        return self.settings.base_url.rstrip("/") + self.settings.login_path

    async def goto(self) -> None:
        await self.page.goto(self.url, wait_until="domcontentloaded")

    async def saudi_id_input(self) -> Any:
        return await self.locator.find_input(
            "SaudiIdInput",
            type="text",
            name="id",
            id="id",
            placeholder="Saudi ID",
            label="Saudi ID",
        )

    async def login_button(self) -> Any:
        return await self.locator.find_button(
            "LoginButton",
            text=re.compile("login", re.IGNORECASE),
            type="submit",
        )

    async def enter_saudi_id(self, saudi_id: str) -> None:
        field = await self.saudi_id_input()
        await field.click()
        await field.fill(saudi_id)

    async def click_login(self) -> None:
        button = await self.login_button()
        await button.click()

    async def login(self, saudi_id: Optional[str] = None) -> None:
        """
        Fill the Saudi ID and submit.

        Uses the configured ID when none is given.

        Raises:
            PageAccessError: The portal reported a login failure
        """
        if saudi_id is None:
            saudi_id = self.settings.saudi_id.get_secret_value()

        await self.enter_saudi_id(saudi_id)
        await self.click_login()
        await self.page.wait_for_load_state("domcontentloaded")

        error = await self.login_error()
        if error:
            raise PageAccessError("Login failed", {"message": error})
        logger.info("Login submitted")

    async def login_error(self) -> Optional[str]:
        """Text of the first visible error message, or None."""
        access = self.locator.page
        for selector in ERROR_SELECTORS:
            query = StructuralQuery(selector, first=True).compile(access)
            try:
                element = await access.wait_until_visible(query, ERROR_PROBE_TIMEOUT_MS)
            except PageAccessError:
                continue
            return await access.get_text(element) or ""
        return None
