"""
balena settings client.

Resolves balena settings from defaults, user and project config files
and ``BALENARC_*`` environment variables.
"""

__version__ = "1.0.0"
__author__ = "balena"

from balena_settings.core.exceptions import (
    BalenaSettingsError,
    ConfigurationError,
    SettingsParseError,
)
from balena_settings.core.resolver import ConfigSource, SettingsResolver, SourceKind
from balena_settings.settings import get, get_all, get_resolver

__all__ = [
    "__version__",
    "get",
    "get_all",
    "get_resolver",
    "SettingsResolver",
    "ConfigSource",
    "SourceKind",
    "BalenaSettingsError",
    "ConfigurationError",
    "SettingsParseError",
]
