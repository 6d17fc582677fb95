"""
Core settings resolution components.

This module provides:
- read_config_file: YAML config file reader
- replace_legacy_keys: resin-era key normalization
- environment: BALENARC_* environment variable parsing
- deep_merge / merge_settings: precedence-ordered merging
- Derived / evaluate_setting: setting evaluation
- Custom exceptions

The resolver lives in ``balena_settings.core.resolver``.
"""

from balena_settings.core.evaluate import Derived, SettingValue, evaluate_setting
from balena_settings.core.exceptions import (
    BalenaSettingsError,
    ConfigurationError,
    SettingsParseError,
)
from balena_settings.core.merge import deep_merge, merge_settings
from balena_settings.core.normalizer import replace_legacy_keys

__all__ = [
    "Derived",
    "SettingValue",
    "evaluate_setting",
    "BalenaSettingsError",
    "ConfigurationError",
    "SettingsParseError",
    "deep_merge",
    "merge_settings",
    "replace_legacy_keys",
]
