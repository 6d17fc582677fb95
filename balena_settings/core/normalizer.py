"""
Legacy key normalization.

Config files written for the resin-era tooling name settings such as
``resinUrl``. They are read as their balena equivalents.
"""

from __future__ import annotations

from typing import Any, Dict

LEGACY_NAME = "resin"
CURRENT_NAME = "balena"


def replace_legacy_keys(
    mapping: Dict[Any, Any],
    legacy: str = LEGACY_NAME,
    current: str = CURRENT_NAME,
) -> Dict[Any, Any]:
    """
    Rename legacy keys of a mapping.

    The first occurrence of ``legacy`` in each key is replaced by
    ``current``. Values, and keys without the legacy name, are kept as is.

    Args:
        mapping: Mapping read from a legacy source.
        legacy: Legacy product name.
        current: Current product name.

    Returns:
        New mapping with normalized keys.
    """
    return {
        (key.replace(legacy, current, 1) if isinstance(key, str) else key): value
        for key, value in mapping.items()
    }
