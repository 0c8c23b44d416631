"""
Configuration for the locator, the browser launcher and the portal pages.

    settings = get_settings()                      # cached, loaded on first use
    fresh = load_config(locator={"learning_file": "learning.json"})

Variables understood besides the config file:
    HEALING_LOCATOR__LOCATOR__CANDIDATE_TIMEOUT_MS=3000
    HEALING_LOCATOR__BROWSER__HEADLESS=false
    BASE_URL, SAUDI_ID, EXPECTED_NAME
"""

from healing_locator.config.settings import (
    Settings,
    LocatorSettings,
    BrowserSettings,
    PortalSettings,
    LoggingSettings,
)
from healing_locator.config.loader import ConfigLoader, load_config

_settings: Settings | None = None


def get_settings() -> Settings:
    """Settings for this process, loaded on the first call."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "LocatorSettings",
    "BrowserSettings",
    "PortalSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_config",
    "get_settings",
    "reset_settings",
]
