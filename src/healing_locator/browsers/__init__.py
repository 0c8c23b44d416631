"""
Browsers module - Page access implementations.
"""

from healing_locator.browsers.playwright_page import PlaywrightPageAccess, launch_page

__all__ = [
    "PlaywrightPageAccess",
    "launch_page",
]
