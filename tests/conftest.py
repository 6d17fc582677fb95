"""
Pytest configuration and fixtures for balena settings tests.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional, Union

import pytest

from balena_settings.config.paths import ConfigPaths, get_config_paths
from balena_settings.core.reader import read_config_file
from balena_settings.core.resolver import SettingsResolver


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_paths(temp_dir: Path) -> ConfigPaths:
    """Config paths rooted in separate home and project directories."""
    home = temp_dir / "home"
    project = temp_dir / "project"
    home.mkdir()
    project.mkdir()
    return get_config_paths(home=home, cwd=project, system="Linux")


@pytest.fixture
def sample_defaults() -> Dict[str, Any]:
    """Small set of defaults for resolution tests."""
    return {
        "dataDirectory": "/opt/default",
        "balenaUrl": "balena-cloud.com",
    }


class CountingReader:
    """Config reader double recording every file it reads."""

    def __init__(self) -> None:
        self.calls: List[Path] = []

    def __call__(self, path: Union[str, Path]) -> Dict[str, Any]:
        self.calls.append(Path(path))
        return read_config_file(path)


@pytest.fixture
def counting_reader() -> CountingReader:
    """Create a reader that counts reads."""
    return CountingReader()


@pytest.fixture
def make_resolver(
    config_paths: ConfigPaths,
    sample_defaults: Dict[str, Any],
) -> Callable[..., SettingsResolver]:
    """Factory building isolated resolvers over the temporary config paths."""

    def _make(
        environ: Optional[Dict[str, str]] = None,
        defaults: Optional[Dict[str, Any]] = None,
        reader: Optional[Callable[[Union[str, Path]], Dict[str, Any]]] = None,
    ) -> SettingsResolver:
        kwargs: Dict[str, Any] = {}
        if reader is not None:
            kwargs["reader"] = reader
        return SettingsResolver(
            paths=config_paths,
            environ=environ if environ is not None else {},
            defaults=defaults if defaults is not None else sample_defaults,
            **kwargs,
        )

    return _make
