"""
Utilities module - Common utility functions.
"""

from healing_locator.utils.logging import setup_logging, setup_logging_from_settings, get_logger
from healing_locator.utils.waits import wait_for_condition, with_timeout

__all__ = [
    "setup_logging",
    "setup_logging_from_settings",
    "get_logger",
    "wait_for_condition",
    "with_timeout",
]
