"""
Settings resolver.

Merges every configuration layer, lowest precedence first:

1. Default settings
2. Legacy user config file (``resin`` keys renamed to ``balena``)
3. User config file
4. Legacy project config file (``resin`` keys renamed to ``balena``)
5. Project config file
6. Environment variables matching ``BALENARC_<SETTING_NAME>``

For example, given::

    $ cat $HOME/.balenarc.yml
    balenaUrl: 'balena-staging.com'
    projectsDirectory: '/opt/balena'

    $ cat $PWD/balenarc.yml
    projectsDirectory: '/Users/balena/Projects'
    dataDirectory: '/opt/balena-data'

    $ echo $BALENARC_DATA_DIRECTORY
    /opt/cache/balena

the resolved settings are::

    balenaUrl: 'balena-staging.com'
    projectsDirectory: '/Users/balena/Projects'
    dataDirectory: '/opt/cache/balena'

The merge runs once per resolver; its result is cached and never
recomputed. If it fails, nothing is cached and the next call retries.
"""

from __future__ import annotations

import os
import threading
from copy import deepcopy
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from balena_settings.config.defaults import get_defaults
from balena_settings.config.logging_config import get_logger
from balena_settings.config.paths import ConfigPaths, get_config_paths
from balena_settings.core import environment
from balena_settings.core.evaluate import evaluate_setting
from balena_settings.core.merge import merge_settings
from balena_settings.core.normalizer import replace_legacy_keys
from balena_settings.core.reader import RawMapping, read_config_file

logger = get_logger(__name__)

Reader = Callable[[Union[str, Path]], RawMapping]


class SourceKind(str, Enum):
    """Kind of configuration source."""

    DEFAULTS = "defaults"
    FILE = "file"
    ENVIRONMENT = "environment"


@dataclass(frozen=True)
class ConfigSource:
    """
    Descriptor of one configuration layer.

    Attributes:
        name: Short identifier, e.g. ``user_legacy``.
        kind: Where the values come from.
        rank: Precedence; higher ranks override lower ones.
        path: File location for file sources.
        legacy: Whether keys need legacy normalization.
    """

    name: str
    kind: SourceKind
    rank: int
    path: Optional[Path] = None
    legacy: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a serializable dictionary."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "rank": self.rank,
            "path": str(self.path) if self.path is not None else None,
            "legacy": self.legacy,
        }


class SettingsResolver:
    """
    Resolves and caches the effective settings.

    Construct one at startup and hand it to the code that needs settings.
    Tests build a fresh resolver per case with injected paths, environment
    and defaults.

    Example:
        ```python
        resolver = SettingsResolver()
        resolver.get("dataDirectory")
        resolver.get_all()
        ```
    """

    def __init__(
        self,
        paths: Optional[ConfigPaths] = None,
        environ: Optional[Mapping[str, str]] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        reader: Reader = read_config_file,
    ) -> None:
        """
        Initialize the resolver. No source is read until first access.

        Args:
            paths: Config file locations (defaults to the platform locations).
            environ: Environment variables (defaults to ``os.environ``).
            defaults: Default settings (defaults to the built-in defaults).
            reader: Function reading one config file into a mapping.
        """
        self._paths = paths if paths is not None else get_config_paths()
        self._environ = environ if environ is not None else os.environ
        self._defaults = dict(defaults) if defaults is not None else get_defaults()
        self._reader = reader

        self._lock = threading.Lock()
        self._resolved: Optional[Mapping[str, Any]] = None

    @property
    def paths(self) -> ConfigPaths:
        """Config file locations used by this resolver."""
        return self._paths

    @property
    def sources(self) -> List[ConfigSource]:
        """Configuration layers ordered from lowest to highest precedence."""
        return [
            ConfigSource("defaults", SourceKind.DEFAULTS, 0),
            ConfigSource("user_legacy", SourceKind.FILE, 1, self._paths.user_legacy, legacy=True),
            ConfigSource("user", SourceKind.FILE, 2, self._paths.user),
            ConfigSource("project_legacy", SourceKind.FILE, 3, self._paths.project_legacy, legacy=True),
            ConfigSource("project", SourceKind.FILE, 4, self._paths.project),
            ConfigSource("environment", SourceKind.ENVIRONMENT, 5),
        ]

    @property
    def is_resolved(self) -> bool:
        """Whether settings have been computed and cached."""
        return self._resolved is not None

    def resolve(self) -> Mapping[str, Any]:
        """
        Get the resolved settings, computing them on first use.

        Returns:
            Read-only snapshot of the raw (unevaluated) settings. Nested
            values are copies, so changing them does not affect the cache.

        Raises:
            SettingsParseError: If a config file is not valid YAML.
            OSError: If a config file exists but cannot be read.
        """
        return MappingProxyType(deepcopy(dict(self._resolve())))

    def get(self, name: str, default: Any = None) -> Any:
        """
        Get a setting.

        Args:
            name: Setting name, e.g. ``dataDirectory``.
            default: Value returned when the setting is not defined.

        Returns:
            Evaluated setting value.

        Example:
            >>> resolver.get("dataDirectory")  # doctest: +SKIP
            '/home/user/.balena'
        """
        settings = self._resolve()
        if name not in settings:
            return default
        return deepcopy(evaluate_setting(settings, name))

    def get_all(self) -> Dict[str, Any]:
        """
        Get all settings, each evaluated as ``get`` would.

        Returns:
            New dictionary of every resolved setting.
        """
        settings = self._resolve()
        return {name: self.get(name) for name in settings}

    def _resolve(self) -> Mapping[str, Any]:
        if self._resolved is not None:
            return self._resolved

        with self._lock:
            if self._resolved is None:
                self._resolved = MappingProxyType(self._compute())
            return self._resolved

    def _read_source(self, source: ConfigSource) -> RawMapping:
        if source.kind is SourceKind.DEFAULTS:
            return self._defaults
        if source.kind is SourceKind.ENVIRONMENT:
            return environment.parse(self._environ)

        data = self._reader(source.path)
        if source.legacy:
            data = replace_legacy_keys(data)
        return data

    def _compute(self) -> Dict[str, Any]:
        logger.debug("Resolving settings")

        layers = [self._read_source(source) for source in self.sources]
        settings = merge_settings(*layers)

        logger.debug(f"Resolved {len(settings)} setting(s)")
        return settings
