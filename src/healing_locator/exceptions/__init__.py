"""
Exceptions module - Custom exception hierarchy.

This module defines all custom exceptions used throughout Healing Locator,
providing clear error types for different failure scenarios.
"""

from healing_locator.exceptions.base import (
    HealingLocatorError,
    ConfigurationError,
    LearningDataError,
)
from healing_locator.exceptions.page import (
    PageAccessError,
    ElementTimeoutError,
    BrowserLaunchError,
)
from healing_locator.exceptions.resolution import (
    ResolutionError,
    ResolutionFailure,
    InvalidTargetError,
    InvalidQueryError,
)

__all__ = [
    # Base exceptions
    "HealingLocatorError",
    "ConfigurationError",
    "LearningDataError",
    # Page exceptions
    "PageAccessError",
    "ElementTimeoutError",
    "BrowserLaunchError",
    # Resolution exceptions
    "ResolutionError",
    "ResolutionFailure",
    "InvalidTargetError",
    "InvalidQueryError",
]
