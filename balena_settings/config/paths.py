"""
Config file locations.

UNIX:
    - ``$HOME/.resinrc.yml`` (legacy)
    - ``$HOME/.balenarc.yml``
    - ``$PWD/resinrc.yml`` (legacy)
    - ``$PWD/balenarc.yml``

Windows:
    - ``%UserProfile%\\_resinrc.yml`` (legacy)
    - ``%UserProfile%\\_balenarc.yml``
    - ``%cd%\\resinrc.yml`` (legacy)
    - ``%cd%\\balenarc.yml``
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

PathLike = Union[str, os.PathLike]

USER_CONFIG_NAME = "balenarc.yml"
USER_LEGACY_CONFIG_NAME = "resinrc.yml"
PROJECT_CONFIG_NAME = "balenarc.yml"
PROJECT_LEGACY_CONFIG_NAME = "resinrc.yml"


class ConfigPaths(BaseModel):
    """Locations of the four optional config files."""

    model_config = ConfigDict(frozen=True)

    user_legacy: Path
    user: Path
    project_legacy: Path
    project: Path


def is_windows(system: Optional[str] = None) -> bool:
    """Check whether paths should follow Windows conventions."""
    return (system or platform.system()) == "Windows"


def hidepath(name: str, system: Optional[str] = None) -> str:
    """
    Get the hidden form of a file name for the platform.

    Args:
        name: Bare file name, e.g. ``balenarc.yml``.
        system: Platform name as reported by ``platform.system()``.

    Returns:
        ``_name`` on Windows, ``.name`` elsewhere.
    """
    return f"_{name}" if is_windows(system) else f".{name}"


def get_config_paths(
    home: Optional[PathLike] = None,
    cwd: Optional[PathLike] = None,
    system: Optional[str] = None,
) -> ConfigPaths:
    """
    Resolve config file paths for the current user and directory.

    Args:
        home: User home directory (defaults to ``Path.home()``).
        cwd: Project directory (defaults to ``Path.cwd()``).
        system: Platform name override, mainly for tests.

    Returns:
        ConfigPaths instance. The files need not exist.
    """
    user_home = Path(home) if home is not None else Path.home()
    project_dir = Path(cwd) if cwd is not None else Path.cwd()

    return ConfigPaths(
        user_legacy=user_home / hidepath(USER_LEGACY_CONFIG_NAME, system),
        user=user_home / hidepath(USER_CONFIG_NAME, system),
        project_legacy=project_dir / PROJECT_LEGACY_CONFIG_NAME,
        project=project_dir / PROJECT_CONFIG_NAME,
    )
