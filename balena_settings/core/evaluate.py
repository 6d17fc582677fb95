"""
Setting evaluation.

A stored setting is turned into the value callers see by applying at
most one level of indirection:

- a ``Derived`` value is computed from the other settings, e.g.
  ``apiUrl`` from ``balenaUrl``;
- a string naming another setting is an alias for that setting.

An alias pointing at another alias is not followed further.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Union


@dataclass(frozen=True)
class Derived:
    """
    Setting computed from the other resolved settings.

    Attributes:
        compute: Callable receiving a read-only copy of the raw settings.
        description: Human-readable summary of the derivation.
    """

    compute: Callable[[Mapping[str, Any]], Any]
    description: str = ""

    def __call__(self, settings: Mapping[str, Any]) -> Any:
        return self.compute(settings)


SettingValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any], Derived]


def _as_view(settings: Mapping[str, Any]) -> Mapping[str, Any]:
    # Derived callables get a copy; nested values must not reach the cache
    return MappingProxyType(deepcopy(dict(settings)))


def evaluate_setting(settings: Mapping[str, Any], name: str) -> Optional[Any]:
    """
    Evaluate a single setting.

    Args:
        settings: Resolved settings mapping.
        name: Setting name.

    Returns:
        Evaluated value, or None if the setting is not defined.
    """
    if name not in settings:
        return None

    value = settings[name]

    if isinstance(value, Derived):
        return value(_as_view(settings))

    if isinstance(value, str) and value != name and value in settings:
        target = settings[value]
        if isinstance(target, Derived):
            return target(_as_view(settings))
        return target

    return value
