"""
Config file reader.

Files are read synchronously: consumers expect settings to be usable
the moment they ask for them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

import yaml

from balena_settings.config.logging_config import get_logger
from balena_settings.core.exceptions import SettingsParseError

logger = get_logger(__name__)

RawMapping = Dict[str, Any]


def read_config_file(path: Union[str, Path]) -> RawMapping:
    """
    Read a YAML config file into a flat mapping.

    Args:
        path: Path to the config file. It does not need to exist.

    Returns:
        Parsed mapping, or an empty mapping when the file is absent or empty.

    Raises:
        SettingsParseError: If the file exists but is not UTF-8 text
            holding a YAML mapping.
        OSError: If the file exists but cannot be read.
    """
    config_path = Path(path)

    log_extra = {"config_file": str(config_path)}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            contents = f.read()
    except FileNotFoundError:
        logger.debug(f"Config file not found, skipping: {config_path}", extra=log_extra)
        return {}
    except UnicodeDecodeError as e:
        raise SettingsParseError(str(config_path), str(e)) from e

    try:
        data = yaml.safe_load(contents)
    except yaml.YAMLError as e:
        raise SettingsParseError(str(config_path), str(e)) from e

    if data is None:
        logger.debug(f"Config file is empty: {config_path}", extra=log_extra)
        return {}

    if not isinstance(data, dict):
        raise SettingsParseError(
            str(config_path),
            f"expected a mapping at the document root, got {type(data).__name__}",
        )

    logger.debug(f"Read {len(data)} setting(s) from {config_path}", extra=log_extra)
    return data
