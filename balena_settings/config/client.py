"""
Options for the balena-settings tool itself.

These control how the bundled command line tool logs. They are read
from ``BALENA_SETTINGS_*`` environment variables, separate from the
``BALENARC_*`` variables that carry balena settings.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    Logging options for the command line tool.

    Loaded from environment variables prefixed with ``BALENA_SETTINGS_``,
    e.g. ``BALENA_SETTINGS_LOG_LEVEL=DEBUG``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BALENA_SETTINGS_",
        case_sensitive=False,
    )

    log_level: str = "WARNING"
    log_json: bool = False
    log_file: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


@lru_cache
def get_client_settings() -> ClientSettings:
    """
    Get client settings singleton.

    Returns:
        ClientSettings instance.
    """
    return ClientSettings()
