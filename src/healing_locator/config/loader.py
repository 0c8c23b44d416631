"""
Settings assembly for the locator and the portal page objects.

Sources, later ones winning:
    defaults, YAML file, HEALING_LOCATOR__* variables,
    plain portal variables (BASE_URL, SAUDI_ID, EXPECTED_NAME),
    keyword overrides given to load_config().

A .env file is read into the process environment first, so its values take
part exactly like real environment variables.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from dotenv import load_dotenv

from healing_locator.config.settings import Settings
from healing_locator.exceptions import ConfigurationError

PathLike = Union[str, Path]


class ConfigLoader:
    """Builds a Settings object from a YAML file, the environment and overrides."""

    # Searched in order when no explicit file is given
    DEFAULT_CONFIG_PATHS: List[Path] = [
        Path("healing-locator.yaml"),
        Path("healing-locator.yml"),
        Path("config/healing-locator.yaml"),
        Path.home() / ".config" / "healing-locator" / "config.yaml",
    ]

    ENV_FILES = (Path(".env"), Path(".env.local"))

    # Unprefixed variables the portal test suite has always read
    PORTAL_ENV_VARS: Dict[str, Tuple[str, str]] = {
        "BASE_URL": ("portal", "base_url"),
        "SAUDI_ID": ("portal", "saudi_id"),
        "EXPECTED_NAME": ("portal", "expected_name"),
    }

    def __init__(self, config_path: Optional[PathLike] = None):
        self.explicit_path = Path(config_path) if config_path else None

    def locate_config_file(self) -> Optional[Path]:
        """
        Pick the YAML file to read.

        An explicit path must exist. Otherwise the first existing default
        location is used, and no file at all is fine.
        """
        if self.explicit_path is not None:
            if not self.explicit_path.exists():
                raise ConfigurationError(f"Config file not found: {self.explicit_path}")
            return self.explicit_path

        return next((p for p in self.DEFAULT_CONFIG_PATHS if p.exists()), None)

    @staticmethod
    def read_config_file(path: Path) -> Dict[str, Any]:
        """Parse a YAML file into a section mapping; an empty file is {}."""
        try:
            raw = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return raw

    def read_env_file(self, env_file: Optional[PathLike] = None) -> None:
        """Export a dotenv file into os.environ (first default that exists)."""
        if env_file:
            load_dotenv(env_file)
            return
        found = next((p for p in self.ENV_FILES if p.exists()), None)
        if found is not None:
            load_dotenv(found)

    def portal_env_overrides(self) -> Dict[str, Any]:
        """Map set BASE_URL / SAUDI_ID / EXPECTED_NAME onto the portal section."""
        sections: Dict[str, Any] = {}
        for var, (section, key) in self.PORTAL_ENV_VARS.items():
            value = os.environ.get(var)
            if value:
                sections.setdefault(section, {})[key] = value
        return sections

    def load(
        self,
        env_file: Optional[PathLike] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> Settings:
        self.read_env_file(env_file)

        path = self.locate_config_file()
        file_values = self.read_config_file(path) if path else {}

        # pydantic-settings layers HEALING_LOCATOR__* on top of the file values
        settings = Settings(**file_values)

        for layer in (self.portal_env_overrides(), overrides or {}):
            if layer:
                settings = settings.merge_with(layer)
        return settings


def load_config(
    config_path: Optional[PathLike] = None,
    env_file: Optional[PathLike] = None,
    **overrides: Any,
) -> Settings:
    """
    Load settings in one call.

    Keyword arguments are section dictionaries applied last, e.g.
    ``load_config(locator={"candidate_timeout_ms": 3000})``.
    """
    return ConfigLoader(config_path).load(env_file=env_file, overrides=overrides)
