"""
Playwright Page Access - Implementation of IPageAccess using Playwright.

Queries and elements are both Playwright Locators. A query is turned into
an element by waiting for it to become visible; Playwright's strict mode
means a query matching several visible elements fails the wait, which the
resolver treats like any other candidate failure.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional
import logging

from healing_locator.interfaces.page import IPageAccess, BoundingBox, TextMatch
from healing_locator.exceptions.page import (
    PageAccessError,
    ElementTimeoutError,
    BrowserLaunchError,
)

logger = logging.getLogger(__name__)


_ATTRIBUTES_JS = """el => {
    const attrs = {};
    for (const attr of el.attributes) {
        attrs[attr.name] = attr.value;
    }
    return attrs;
}"""

_TAG_NAME_JS = "el => el.tagName.toLowerCase()"


class PlaywrightPageAccess(IPageAccess):
    """
    Playwright implementation of IPageAccess.

    Wraps an async Playwright Page.

    Example:
        >>> access = PlaywrightPageAccess(page)
        >>> query = access.query_by_role("button", name="Login")
        >>> button = await access.wait_until_visible(query, timeout_ms=5000)
        >>> await button.click()
    """

    def __init__(self, page: Any):
        """
        Initialize the page wrapper.

        Args:
            page: playwright.async_api.Page
        """
        self._page = page

    @property
    def page(self) -> Any:
        """The wrapped Playwright page."""
        return self._page

    def query_by_role(self, role: str, name: Optional[TextMatch] = None) -> Any:
        if name is None:
            return self._page.get_by_role(role)
        return self._page.get_by_role(role, name=name)

    def query_by_test_id(self, test_id: str) -> Any:
        return self._page.get_by_test_id(test_id)

    def query_by_label(self, label: str) -> Any:
        return self._page.get_by_label(label)

    def query_by_placeholder(self, text: str) -> Any:
        return self._page.get_by_placeholder(text)

    def query_by_text(self, text: TextMatch, exact: bool = False) -> Any:
        if isinstance(text, str):
            return self._page.get_by_text(text, exact=exact)
        return self._page.get_by_text(text)

    def query_by_structural_selector(self, selector: str, first: bool = False) -> Any:
        locator = self._page.locator(selector)
        return locator.first if first else locator

    async def wait_until_visible(self, query: Any, timeout_ms: int) -> Any:
        """Wait for the locator to be visible and return it."""
        from playwright.async_api import Error as PlaywrightError
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        try:
            await query.wait_for(state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ElementTimeoutError(
                f"Not visible within {timeout_ms}ms",
                query=str(query),
                timeout_ms=timeout_ms,
            ) from e
        except PlaywrightError as e:
            raise PageAccessError(f"Query failed: {e.message}", {"query": str(query)}) from e
        return query

    async def all_elements(self, query: Any) -> List[Any]:
        return await query.all()

    async def get_attributes(self, element: Any) -> Dict[str, str]:
        return await element.evaluate(_ATTRIBUTES_JS)

    async def get_text(self, element: Any) -> Optional[str]:
        text = await element.text_content()
        if text is None:
            return None
        return text.strip() or None

    async def get_tag_name(self, element: Any) -> str:
        return await element.evaluate(_TAG_NAME_JS)

    async def get_bounding_box(self, element: Any) -> Optional[BoundingBox]:
        return BoundingBox.from_dict(await element.bounding_box())


@asynccontextmanager
async def launch_page(
    headless: bool = True,
    browser_type: str = "chromium",
    base_url: Optional[str] = None,
    viewport: Optional[Dict[str, int]] = None,
    timeout_ms: Optional[int] = None,
    navigation_timeout_ms: Optional[int] = None,
    **launch_options: Any,
) -> AsyncIterator[Any]:
    """
    Launch a browser and yield a fresh Playwright page.

    The browser, context and driver are torn down on exit.

    Args:
        headless: Whether to run headless
        browser_type: 'chromium', 'firefox' or 'webkit'
        base_url: Base URL for relative navigation
        viewport: {'width': ..., 'height': ...}
        timeout_ms: Default action timeout
        navigation_timeout_ms: Default navigation timeout
        **launch_options: Additional Playwright launch options
    """
    from playwright.async_api import async_playwright

    async with async_playwright() as playwright:
        launchers = {
            "chromium": playwright.chromium,
            "firefox": playwright.firefox,
            "webkit": playwright.webkit,
        }
        launcher = launchers.get(browser_type, playwright.chromium)

        try:
            browser = await launcher.launch(headless=headless, **launch_options)
        except Exception as e:
            raise BrowserLaunchError(f"Failed to launch browser: {e}")

        logger.info(f"Launched {browser_type} browser (headless={headless})")

        context_options: Dict[str, Any] = {}
        if base_url:
            context_options["base_url"] = base_url
        if viewport:
            context_options["viewport"] = viewport

        context = await browser.new_context(**context_options)
        if timeout_ms:
            context.set_default_timeout(timeout_ms)
        if navigation_timeout_ms:
            context.set_default_navigation_timeout(navigation_timeout_ms)

        try:
            yield await context.new_page()
        finally:
            await context.close()
            await browser.close()
            logger.info("Browser closed")
