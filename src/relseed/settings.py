"""
Settings management for relseed.

Loads defaults from relseed.toml files and RELSEED_* environment variables
using pydantic-settings.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILENAME = "relseed.toml"


class RelSeedSettings(BaseSettings):
    """Library-wide defaults for generation runs."""

    model_config = SettingsConfigDict(env_prefix="RELSEED_")

    seed: Optional[int] = Field(
        default=None, description="Seed used when a run sets none"
    )
    faker_locale: str = Field(default="en_US", description="Faker locale")
    log_level: str = Field(default="WARNING", description="Level of the relseed logger")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_toml(cls, path: Path | str) -> RelSeedSettings:
        """
        Load settings from a TOML file.

        Reads the [relseed] table when present, else the top level.

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data.get("relseed", data))

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> RelSeedSettings:
        """
        Find and load relseed.toml, walking up from start_dir.

        Falls back to defaults (plus environment) when no file is found.
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        # Walk up directory tree
        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        return cls()


def configure_logging(settings: RelSeedSettings) -> None:
    """Set the relseed logger level from settings (handlers are left to the app)."""
    logging.getLogger("relseed").setLevel(settings.log_level)
