"""
Built-in default settings.

These form the lowest-precedence layer. Settings wrapped in ``Derived``
follow whatever the other layers resolve: overriding ``balenaUrl`` moves
``apiUrl`` and ``dashboardUrl`` along with it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

from balena_settings.config.paths import PathLike, hidepath
from balena_settings.core.evaluate import Derived, SettingValue

ONE_HOUR_MS = 60 * 60 * 1000
ONE_WEEK_MS = 7 * 24 * ONE_HOUR_MS


def get_defaults(
    home: Optional[PathLike] = None,
    system: Optional[str] = None,
) -> Dict[str, SettingValue]:
    """
    Build the default settings for a user.

    Args:
        home: User home directory (defaults to ``Path.home()``).
        system: Platform name override, mainly for tests.

    Returns:
        Fresh mapping of setting names to default values.
    """
    user_home = Path(home) if home is not None else Path.home()

    return {
        "balenaUrl": "balena-cloud.com",
        "apiUrl": Derived(
            lambda settings: f"https://api.{settings['balenaUrl']}",
            "https://api.<balenaUrl>",
        ),
        "dashboardUrl": Derived(
            lambda settings: f"https://dashboard.{settings['balenaUrl']}",
            "https://dashboard.<balenaUrl>",
        ),
        "dataDirectory": str(user_home / hidepath("balena", system)),
        "cacheDirectory": Derived(
            lambda settings: os.path.join(settings["dataDirectory"], "cache"),
            "<dataDirectory>/cache",
        ),
        "binDirectory": Derived(
            lambda settings: os.path.join(settings["dataDirectory"], "bin"),
            "<dataDirectory>/bin",
        ),
        "imageCacheTime": ONE_WEEK_MS,
        "tokenRefreshInterval": ONE_HOUR_MS,
        "projectsDirectory": str(user_home / "BalenaProjects"),
    }
