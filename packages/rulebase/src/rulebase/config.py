"""
Engine configuration.

Loads RULEBASE_* environment variables (or a .env file) into a typed
settings object.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class EngineSettings(BaseSettings):
    """Rule base settings loaded from environment variables."""

    # Default trace sink logs each line; off means a no-op sink
    trace_enabled: bool = Field(default=True, description="Log inference trace lines")
    # Raise UnknownNameError instead of logging and continuing
    strict_names: bool = Field(default=False, description="Fail on unknown variable names")
    trace_logger: str = Field(default="rulebase.trace", description="Logger name for trace lines")

    model_config = SettingsConfigDict(
        env_prefix="RULEBASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    settings = EngineSettings()
    if settings.strict_names:
        logger.info("Strict name checking enabled for rule bases")
    return settings
