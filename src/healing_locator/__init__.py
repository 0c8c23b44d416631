"""
Healing Locator - Self-healing element resolution for Playwright.

Describes each element by an ordered list of candidate queries, resolves the
first one that is visible, learns which candidates work, and recovers
elements by fingerprint similarity when every candidate breaks.

Example:
    >>> from healing_locator import SelfHealingLocator
    >>> locator = SelfHealingLocator.for_playwright(page)
    >>> button = await locator.find_button("LoginButton", text="Login")
    >>> await button.click()
"""

__version__ = "0.1.0"

# Public API exports
from healing_locator.locator import SelfHealingLocator
from healing_locator.engine.queries import TargetDescription
from healing_locator.config.settings import Settings, LocatorSettings
from healing_locator.exceptions import HealingLocatorError, ResolutionFailure

__all__ = [
    "SelfHealingLocator",
    "TargetDescription",
    "Settings",
    "LocatorSettings",
    "HealingLocatorError",
    "ResolutionFailure",
    "__version__",
]
