"""Environment-driven settings for declarative-rules."""
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime settings, read from DECLARATIVE_RULES_* environment variables."""

    cache_enabled: bool = Field(default=True, description="Whether apply_rules memoizes results")
    log_level: Optional[str] = Field(
        default=None,
        description="Level for the declarative_rules logger; None leaves the logger untouched",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            cache_enabled=os.getenv("DECLARATIVE_RULES_CACHE_ENABLED", "true").strip().lower() in _TRUE_VALUES,
            log_level=os.getenv("DECLARATIVE_RULES_LOG_LEVEL"),
        )


def _apply_logging(settings: Settings) -> None:
    # only an explicit setting overrides the application's logging config
    if settings.log_level is not None:
        logging.getLogger("declarative_rules").setLevel(settings.log_level)


def reload_settings() -> Settings:
    """
    Re-read the environment, replacing the global settings.

    Raises:
        pydantic.ValidationError: If a variable is malformed (current settings are kept)
    """
    global _settings
    settings = Settings.from_env()
    _settings = settings
    _apply_logging(settings)
    return settings


def get_settings() -> Settings:
    """
    Get global settings instance.

    Returns:
        Singleton Settings built from the environment at import
    """
    return _settings


# Read at import so a malformed variable fails on `import declarative_rules`
# rather than on the first evaluation.
_settings = Settings.from_env()
_apply_logging(_settings)
