"""
Page access exceptions.
"""

from healing_locator.exceptions.base import HealingLocatorError


class PageAccessError(HealingLocatorError):
    """Base exception for errors raised by a page access implementation."""
    pass


class ElementTimeoutError(PageAccessError):
    """
    No visible element appeared for a query within its timeout.

    Raised by IPageAccess.wait_until_visible. The resolver treats it as a
    recovered candidate failure.
    """

    def __init__(self, message: str, query: str, timeout_ms: int):
        super().__init__(message, {"query": query, "timeout_ms": timeout_ms})
        self.query = query
        self.timeout_ms = timeout_ms


class BrowserLaunchError(PageAccessError):
    """
    Error launching the browser.

    Raised when the browser fails to start, which could be due to:
    - Missing browser binaries
    - Invalid browser options
    - Resource constraints
    """
    pass
