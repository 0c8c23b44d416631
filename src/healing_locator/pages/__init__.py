"""
Page objects - Portal pages built on SelfHealingLocator.
"""

from healing_locator.pages.login import LoginPage
from healing_locator.pages.dashboard import DashboardPage

__all__ = [
    "LoginPage",
    "DashboardPage",
]
