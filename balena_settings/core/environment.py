"""
Environment variable parsing.

Any variable named ``BALENARC_<SETTING_NAME>`` overrides the setting
whose camelCase name corresponds to ``<SETTING_NAME>``:

    BALENARC_DATA_DIRECTORY=/opt/cache/balena  ->  dataDirectory

Values are kept as the raw strings the environment holds.
"""

from __future__ import annotations

import re
from typing import Dict, Mapping

ENVIRONMENT_PREFIX = "BALENARC_"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def is_setting_variable(variable: str) -> bool:
    """Check whether an environment variable name carries a setting."""
    return variable.startswith(ENVIRONMENT_PREFIX)


def get_setting_name(variable: str) -> str:
    """
    Convert an environment variable name to a setting name.

    Underscores and lower-to-upper case changes both separate words,
    so ``BALENARC_DATA_DIRECTORY`` and ``BALENARC_dataDirectory`` name
    the same setting.

    Args:
        variable: Variable name, with or without the prefix.

    Returns:
        camelCase setting name, or an empty string when nothing is left
        after the prefix.
    """
    if is_setting_variable(variable):
        variable = variable[len(ENVIRONMENT_PREFIX):]

    words = [
        word
        for part in variable.split("_")
        for word in _CAMEL_BOUNDARY.split(part)
        if word
    ]
    if not words:
        return ""

    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


def get_variable_name(setting: str) -> str:
    """
    Convert a setting name to the environment variable that overrides it.

    Example:
        >>> get_variable_name("dataDirectory")
        'BALENARC_DATA_DIRECTORY'
    """
    return ENVIRONMENT_PREFIX + _CAMEL_BOUNDARY.sub("_", setting).upper()


def parse(environ: Mapping[str, str]) -> Dict[str, str]:
    """
    Extract settings from environment variables.

    Args:
        environ: Environment variables, typically ``os.environ``.

    Returns:
        Mapping of setting names to raw string values.
    """
    settings: Dict[str, str] = {}

    for variable, value in environ.items():
        if not is_setting_variable(variable):
            continue

        name = get_setting_name(variable)
        # BALENARC_ alone, or only underscores after it
        if not name:
            continue

        settings[name] = value

    return settings
