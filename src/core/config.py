"""
Application settings.

Values are read from environment variables carrying the CHESSBOT_ prefix, e.g. CHESSBOT_DATABASE_URL.
Anything not set falls back to the defaults below.
"""

import os
from functools import lru_cache
from typing import Mapping, Optional, Self

from pydantic import BaseModel, ValidationError, field_validator

from src.core.exceptions import ConfigurationError

ENV_PREFIX = "CHESSBOT_"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    database_url: str = "sqlite:///chessbot.db"
    database_echo: bool = False
    # active games expire from the store when nobody touched them for this long
    game_ttl_hours: int = 24
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("game_ttl_hours")
    @classmethod
    def validate_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ConfigurationError(f"game_ttl_hours must be positive, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level: {value!r}. \nPick one from {','.join(LOG_LEVELS)}"
            )
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Collect the settings from the environment (or any mapping that looks like it)."""
        environ = os.environ if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in environment: {e}") from e


@lru_cache
def get_settings() -> Settings:
    """Settings of the running process. Read once."""
    return Settings.from_env()
