"""
Configuration collaborators.

Provides the platform-specific config file locations, the built-in
default settings, the tool's own options and logging setup.
"""

from balena_settings.config.client import ClientSettings, get_client_settings
from balena_settings.config.defaults import get_defaults
from balena_settings.config.logging_config import get_logger, setup_logging
from balena_settings.config.paths import ConfigPaths, get_config_paths, hidepath

__all__ = [
    "ClientSettings",
    "get_client_settings",
    "get_defaults",
    "get_logger",
    "setup_logging",
    "ConfigPaths",
    "get_config_paths",
    "hidepath",
]
