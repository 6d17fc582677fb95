"""
Deep merge of setting mappings.

Merge policy:
    - dict + dict -> recursive merge per key
    - list        -> wholesale replacement, no element-wise merge
    - anything else (including mismatched types) -> later value wins

Inputs are never mutated.
"""

from __future__ import annotations

from copy import deepcopy
from functools import reduce
from typing import Any, Dict, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge ``override`` on top of ``base``.

    Args:
        base: Lower-precedence mapping.
        override: Higher-precedence mapping.

    Returns:
        New merged dictionary.
    """
    result: Dict[str, Any] = deepcopy(dict(base))

    for key, override_value in override.items():
        base_value = result.get(key)

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        result[key] = deepcopy(override_value)

    return result


def merge_settings(*mappings: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge mappings left to right into a fresh accumulator.

    Each mapping overrides the ones before it.

    Example:
        >>> merge_settings({"a": 1, "b": {"x": 1}}, {"b": {"y": 2}}, {"a": 3})
        {'a': 3, 'b': {'x': 1, 'y': 2}}
    """
    return reduce(deep_merge, mappings, {})
