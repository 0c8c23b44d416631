"""
Settings models.

Each section is a plain pydantic model; Settings ties them together and reads
HEALING_LOCATOR__<SECTION>__<FIELD> variables through pydantic-settings.

Example:
    >>> from healing_locator.config import load_config
    >>> load_config().locator.candidate_timeout_ms
    5000
"""

from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class LocatorSettings(BaseModel):
    """
    Tuning for resolution, learning and recovery.

    Attributes:
        candidate_timeout_ms: Visibility wait per candidate query
        recovery_timeout_ms: Visibility wait per similarity recovery probe
        success_increment: Success-rate gain for a successful attempt
        failure_decrement: Success-rate loss for a failed attempt
        default_rate: Success rate assumed for untried candidates
        position_tolerance_px: Max offset for positional-context recovery
        similarity_tolerance_px: Max offset for general similarity recovery
        capture_fingerprints: Record element fingerprints on success
        use_learned_patterns: Try a fingerprint-derived selector first in find_input
        learning_file: Optional JSON file holding exported learning data
    """
    candidate_timeout_ms: int = Field(default=5000, ge=100, le=120000)
    recovery_timeout_ms: int = Field(default=1000, ge=100, le=60000)
    success_increment: float = Field(default=0.1, gt=0.0, le=1.0)
    failure_decrement: float = Field(default=0.05, gt=0.0, le=1.0)
    default_rate: float = Field(default=0.5, ge=0.0, le=1.0)
    position_tolerance_px: float = Field(default=100, ge=0)
    similarity_tolerance_px: float = Field(default=50, ge=0)
    capture_fingerprints: bool = True
    use_learned_patterns: bool = True
    learning_file: Optional[str] = None


class BrowserSettings(BaseModel):
    """Launch options for the CLI probe and the pytest fixtures."""
    headless: bool = True
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    # Playwright defaults for actions and page.goto
    timeout_ms: int = Field(default=30000, ge=1000, le=300000)
    navigation_timeout_ms: int = Field(default=60000, ge=1000, le=300000)
    viewport_width: int = Field(default=1280, ge=320, le=3840)
    viewport_height: int = Field(default=720, ge=240, le=2160)
    slow_mo: int = Field(default=0, ge=0, le=5000)


class PortalSettings(BaseModel):
    """
    Portal under test.

    Attributes:
        base_url: Portal root URL
        login_path: Path of the login page
        saudi_id: National ID used for the login flow
        expected_name: Name shown in the dashboard welcome heading
    """
    base_url: str = "https://portal-uat.ntdp-sa.com"
    login_path: str = "/login"
    saudi_id: SecretStr = SecretStr("1111111111")
    expected_name: str = "Dummy"


class LoggingSettings(BaseModel):
    """Root logger level and an optional log file."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_format: bool = False


def _deep_merge(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in updates.items():
        if isinstance(base.get(key), dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


class Settings(BaseSettings):
    """
    All configuration sections.

    Constructor arguments beat HEALING_LOCATOR__* variables, which beat the
    field defaults. ConfigLoader feeds YAML values in as constructor arguments
    and applies the remaining layers with merge_with().
    """

    model_config = SettingsConfigDict(
        env_prefix="HEALING_LOCATOR__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    locator: LocatorSettings = Field(default_factory=LocatorSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    portal: PortalSettings = Field(default_factory=PortalSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    debug: bool = False

    def merge_with(self, overrides: Dict[str, Any]) -> "Settings":
        """Return a copy with nested section dictionaries merged in."""
        return Settings(**_deep_merge(self.model_dump(), overrides))
