"""Configuration management for kb-lifecycle."""

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict
from pydantic import BaseModel, Field, ValidationError, field_validator
from typing import Optional
from pathlib import Path
import os
import json
import logging

from kblifecycle.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

WEEK_SECONDS = 604800


class EngagementSettings(BaseModel):
    """Time windows used by the engagement heuristic."""

    inactivity_weeks: int = 4  # No lookup for this long counts as inactive
    survey_cooldown_weeks: int = 4  # Wait this long before re-asking after a cancel
    config_notices_enabled: bool = True  # Missing-default and deprecated-key notices

    @field_validator("inactivity_weeks", "survey_cooldown_weeks")
    @classmethod
    def validate_positive_weeks(cls, v: int) -> int:
        if v < 1:
            raise ValueError("week windows must be at least 1")
        return v

    @property
    def inactivity_seconds(self) -> int:
        return self.inactivity_weeks * WEEK_SECONDS

    @property
    def survey_cooldown_seconds(self) -> int:
        return self.survey_cooldown_weeks * WEEK_SECONDS


class LifecycleSettings(BaseSettings):
    """kb-lifecycle settings with environment variable support."""

    log_level: str = "INFO"
    json_logs: bool = False

    # Storage
    home_dir: str = "~"
    meta_path: str = "~/.dendron/meta.json"

    # Version reported by this build; compared with the stored one on activation
    extension_version: str = "0.1.0"

    engagement: EngagementSettings = Field(default_factory=EngagementSettings)

    model_config = SettingsConfigDict(
        env_prefix="KB_LIFECYCLE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        """Environment variables win over values passed in (user config file)."""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def get_expanded_path(self, path: str) -> Path:
        """Expand ~ and environment variables in path."""
        return Path(os.path.expanduser(os.path.expandvars(path)))

    @property
    def home_path(self) -> Path:
        return self.get_expanded_path(self.home_dir)

    @property
    def meta_path_expanded(self) -> Path:
        """Get expanded metadata file path."""
        return self.get_expanded_path(self.meta_path)


# Global config instance
_config: Optional[LifecycleSettings] = None

# User config file location
_USER_CONFIG_PATH = Path.home() / ".dendron" / "lifecycle.json"


def _load_user_config_overrides() -> dict:
    """
    Load user configuration overrides from ~/.dendron/lifecycle.json.

    Returns:
        Dict of config overrides, or empty dict if no config file exists
    """
    if not _USER_CONFIG_PATH.exists():
        return {}

    try:
        with open(_USER_CONFIG_PATH, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Failed to load user config from {_USER_CONFIG_PATH}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring user config {_USER_CONFIG_PATH}: top level must be an object")
        return {}
    return data


def get_config() -> LifecycleSettings:
    """
    Get or create global configuration instance.

    Configuration priority (highest to lowest):
    1. Environment variables (KB_LIFECYCLE_*)
    2. User config file (~/.dendron/lifecycle.json)
    3. Built-in defaults

    Raises:
        ConfigurationError: If a setting from either source is invalid
    """
    global _config
    if _config is None:
        user_overrides = _load_user_config_overrides()
        try:
            _config = LifecycleSettings(**user_overrides)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid kb-lifecycle settings: {e}",
                solution=(
                    "Fix the KB_LIFECYCLE_* environment variables or "
                    f"the values in {_USER_CONFIG_PATH}"
                ),
            ) from e
    return _config


def set_config(config: Optional[LifecycleSettings]) -> None:
    """Set global configuration instance (mainly for testing)."""
    global _config
    _config = config
