"""
Module-level settings access.

``get`` and ``get_all`` use a resolver shared by the whole process,
created on first use for the current user and working directory.
Code that needs isolation, tests in particular, should construct its
own ``SettingsResolver`` instead.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict

from balena_settings.core.resolver import SettingsResolver


@lru_cache
def get_resolver() -> SettingsResolver:
    """
    Get the process-wide resolver.

    Returns:
        SettingsResolver for the platform config locations and ``os.environ``.
    """
    return SettingsResolver()


def get(name: str) -> Any:
    """
    Get a setting.

    Args:
        name: Setting name.

    Returns:
        Evaluated setting value, or None if not defined.

    Example:
        >>> get("dataDirectory")  # doctest: +SKIP
        '/home/user/.balena'
    """
    return get_resolver().get(name)


def get_all() -> Dict[str, Any]:
    """
    Get all settings.

    Returns:
        Dictionary of every evaluated setting.
    """
    return get_resolver().get_all()
