"""Tests for the settings resolver."""

from __future__ import annotations

import itertools
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, Union

import pytest

from balena_settings.config.paths import ConfigPaths
from balena_settings.core.evaluate import Derived
from balena_settings.core.exceptions import SettingsParseError
from balena_settings.core.reader import read_config_file
from balena_settings.core.resolver import ConfigSource, SettingsResolver, SourceKind

SOURCE_NAMES = ["defaults", "user_legacy", "user", "project_legacy", "project", "environment"]

SOURCE_SUBSETS: List[Tuple[str, ...]] = [
    subset
    for size in range(1, len(SOURCE_NAMES) + 1)
    for subset in itertools.combinations(SOURCE_NAMES, size)
]


class TestSources:
    """Tests for the ordered source descriptors."""

    def test_source_order(self, make_resolver: Callable[..., SettingsResolver]) -> None:
        """Sources are listed from lowest to highest precedence."""
        sources = make_resolver().sources

        assert [source.name for source in sources] == SOURCE_NAMES
        assert [source.rank for source in sources] == [0, 1, 2, 3, 4, 5]

    def test_source_kinds_and_paths(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """File sources carry their paths and legacy flags."""
        sources = {source.name: source for source in make_resolver().sources}

        assert sources["defaults"].kind is SourceKind.DEFAULTS
        assert sources["environment"].kind is SourceKind.ENVIRONMENT
        assert sources["user_legacy"] == ConfigSource(
            "user_legacy", SourceKind.FILE, 1, config_paths.user_legacy, legacy=True
        )
        assert sources["user"].path == config_paths.user
        assert sources["user"].legacy is False
        assert sources["project_legacy"].legacy is True
        assert sources["project"].path == config_paths.project

    def test_source_to_dict(self, temp_dir: Path) -> None:
        """Descriptors serialize to plain dictionaries."""
        source = ConfigSource("user", SourceKind.FILE, 2, temp_dir / "balenarc.yml")

        assert source.to_dict() == {
            "name": "user",
            "kind": "file",
            "rank": 2,
            "path": str(temp_dir / "balenarc.yml"),
            "legacy": False,
        }


class TestPrecedence:
    """Tests for source precedence."""

    @pytest.mark.parametrize("subset", SOURCE_SUBSETS, ids=lambda s: "+".join(s))
    def test_highest_precedence_source_wins(
        self,
        subset: Tuple[str, ...],
        config_paths: ConfigPaths,
    ) -> None:
        """The highest ranked source defining a key wins, for any subset."""
        defaults: Dict[str, Any] = {"other": "default"}
        environ: Dict[str, str] = {}

        for name in subset:
            if name == "defaults":
                defaults["balenaUrl"] = name
            elif name == "environment":
                environ["BALENARC_BALENA_URL"] = name
            elif name.endswith("_legacy"):
                # legacy files use the resin-era key name
                getattr(config_paths, name).write_text(f"resinUrl: {name}\n", encoding="utf-8")
            else:
                getattr(config_paths, name).write_text(f"balenaUrl: {name}\n", encoding="utf-8")

        resolver = SettingsResolver(paths=config_paths, environ=environ, defaults=defaults)

        assert resolver.get("balenaUrl") == subset[-1]
        assert resolver.get("other") == "default"


class TestLegacyNormalization:
    """Tests for legacy key handling during resolution."""

    def test_legacy_files_are_normalized(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """Legacy keys in legacy files are read as balena keys."""
        config_paths.user_legacy.write_text("resinDataDirectory: /opt/user\n", encoding="utf-8")
        config_paths.project_legacy.write_text("resinToken: abc\n", encoding="utf-8")

        settings = make_resolver().get_all()

        assert settings["balenaDataDirectory"] == "/opt/user"
        assert settings["balenaToken"] == "abc"
        assert "resinDataDirectory" not in settings
        assert "resinToken" not in settings

    def test_current_files_are_not_normalized(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """A literal resin key in a current file stays as written."""
        config_paths.user.write_text("resinDataDirectory: /opt/user\n", encoding="utf-8")
        config_paths.project.write_text("resinToken: abc\n", encoding="utf-8")

        settings = make_resolver().get_all()

        assert settings["resinDataDirectory"] == "/opt/user"
        assert settings["resinToken"] == "abc"
        assert "balenaDataDirectory" not in settings
        assert "balenaToken" not in settings

    def test_environment_is_not_normalized(
        self,
        make_resolver: Callable[..., SettingsResolver],
    ) -> None:
        """Environment variables are never normalized."""
        resolver = make_resolver(environ={"BALENARC_RESIN_URL": "resin.io"})
        assert resolver.get("resinUrl") == "resin.io"
        assert resolver.get("balenaUrl") == "balena-cloud.com"


class TestCaching:
    """Tests for compute-once behavior."""

    def test_sources_read_once(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
        counting_reader: Any,
    ) -> None:
        """Repeated access never re-reads config files."""
        config_paths.user.write_text("balenaUrl: balena-staging.com\n", encoding="utf-8")
        resolver = make_resolver(reader=counting_reader)

        assert resolver.is_resolved is False
        first = resolver.get_all()
        second = resolver.get_all()
        resolver.get("balenaUrl")
        resolver.get("missing")

        assert first == second
        assert resolver.is_resolved is True
        assert counting_reader.calls == [
            config_paths.user_legacy,
            config_paths.user,
            config_paths.project_legacy,
            config_paths.project,
        ]

    def test_nothing_read_before_first_access(
        self,
        make_resolver: Callable[..., SettingsResolver],
        counting_reader: Any,
    ) -> None:
        """Constructing a resolver reads nothing."""
        make_resolver(reader=counting_reader)
        assert counting_reader.calls == []

    def test_later_changes_are_not_observed(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """Once resolved, settings never change."""
        environ = {"BALENARC_PROXY": "http://one"}
        resolver = make_resolver(environ=environ)
        config_paths.user.write_text("balenaUrl: first.com\n", encoding="utf-8")

        assert resolver.get("balenaUrl") == "first.com"

        config_paths.user.write_text("balenaUrl: second.com\n", encoding="utf-8")
        environ["BALENARC_PROXY"] = "http://two"

        assert resolver.get("balenaUrl") == "first.com"
        assert resolver.get("proxy") == "http://one"

    def test_concurrent_first_access_reads_once(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """Concurrent first callers share a single computation."""
        calls: List[Path] = []
        calls_lock = threading.Lock()

        def slow_reader(path: Union[str, Path]) -> Dict[str, Any]:
            with calls_lock:
                calls.append(Path(path))
            time.sleep(0.01)
            return read_config_file(path)

        config_paths.project.write_text("dataDirectory: /opt/balena\n", encoding="utf-8")
        resolver = make_resolver(reader=slow_reader)
        barrier = threading.Barrier(8)
        results: List[Dict[str, Any]] = []

        def worker() -> None:
            barrier.wait()
            settings = resolver.get_all()
            with calls_lock:
                results.append(settings)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 4
        assert len(results) == 8
        assert all(result["dataDirectory"] == "/opt/balena" for result in results)


class TestFailure:
    """Tests for failed resolution."""

    def test_parse_error_aborts_resolution(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """Invalid YAML in any file fails the whole resolution."""
        config_paths.user.write_text("balenaUrl: foo: bar\n", encoding="utf-8")
        config_paths.project.write_text("dataDirectory: /opt/balena\n", encoding="utf-8")
        resolver = make_resolver()

        with pytest.raises(SettingsParseError) as exc_info:
            resolver.get("dataDirectory")

        assert exc_info.value.config_file == str(config_paths.user)
        assert resolver.is_resolved is False

        with pytest.raises(SettingsParseError):
            resolver.get_all()

    def test_failure_is_not_cached(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
        counting_reader: Any,
    ) -> None:
        """A later call retries from scratch after a failure."""
        config_paths.project.write_text("- not\n- a mapping\n", encoding="utf-8")
        resolver = make_resolver(reader=counting_reader)

        with pytest.raises(SettingsParseError):
            resolver.get_all()

        config_paths.project.write_text("dataDirectory: /opt/balena\n", encoding="utf-8")

        assert resolver.get("dataDirectory") == "/opt/balena"
        assert len(counting_reader.calls) == 8

    def test_os_error_propagates(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """Read errors reach the caller unchanged."""
        config_paths.project.mkdir()

        with pytest.raises(OSError):
            make_resolver().get_all()


class TestAccessors:
    """Tests for get and get_all."""

    def test_unknown_setting(self, make_resolver: Callable[..., SettingsResolver]) -> None:
        """Unknown settings yield None or the given default."""
        resolver = make_resolver()

        assert resolver.get("doesNotExist") is None
        assert resolver.get("doesNotExist", "fallback") == "fallback"

    def test_get_all_evaluates_every_setting(
        self,
        make_resolver: Callable[..., SettingsResolver],
    ) -> None:
        """get_all applies the same evaluation as get."""
        defaults = {
            "balenaUrl": "balena-cloud.com",
            "apiUrl": Derived(lambda s: f"https://api.{s['balenaUrl']}"),
            "endpoint": "balenaUrl",
        }
        resolver = make_resolver(defaults=defaults, environ={"BALENARC_BALENA_URL": "balena-staging.com"})

        assert resolver.get_all() == {
            "balenaUrl": "balena-staging.com",
            "apiUrl": "https://api.balena-staging.com",
            "endpoint": "balena-staging.com",
        }

    def test_results_do_not_share_state(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """Mutating returned values leaves the cache intact."""
        config_paths.user.write_text("proxy:\n  host: a.example.com\nignore: [a]\n", encoding="utf-8")
        resolver = make_resolver()

        settings = resolver.get_all()
        settings["proxy"]["host"] = "changed"
        settings["ignore"].append("b")
        settings["extra"] = True
        resolver.get("proxy")["port"] = 1

        assert resolver.get("proxy") == {"host": "a.example.com"}
        assert resolver.get("ignore") == ["a"]
        assert "extra" not in resolver.get_all()

    def test_resolved_mapping_is_read_only(self, make_resolver: Callable[..., SettingsResolver]) -> None:
        """The cached mapping cannot be modified."""
        resolved = make_resolver().resolve()

        with pytest.raises(TypeError):
            resolved["balenaUrl"] = "changed"  # type: ignore[index]

    def test_resolved_nested_values_are_copies(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """Changing nested values of the resolved mapping leaves the cache intact."""
        config_paths.user.write_text("proxy:\n  host: a.example.com\nignore: [a]\n", encoding="utf-8")
        resolver = make_resolver()

        resolved = resolver.resolve()
        resolved["proxy"]["host"] = "changed"
        resolved["ignore"].append("b")

        assert resolver.get("proxy") == {"host": "a.example.com"}
        assert resolver.get("ignore") == ["a"]
        assert resolver.resolve()["proxy"] == {"host": "a.example.com"}

    def test_derived_setting_cannot_change_cache(
        self,
        make_resolver: Callable[..., SettingsResolver],
    ) -> None:
        """A derived setting that modifies nested values does not affect other settings."""

        def tamper(settings: Dict[str, Any]) -> str:
            settings["proxy"]["host"] = "changed"
            return settings["proxy"]["host"]

        defaults = {
            "proxy": {"host": "a.example.com"},
            "tampered": Derived(tamper),
        }
        resolver = make_resolver(defaults=defaults)

        assert resolver.get("tampered") == "changed"
        assert resolver.get("proxy") == {"host": "a.example.com"}

    def test_nested_settings_merge(
        self,
        make_resolver: Callable[..., SettingsResolver],
        config_paths: ConfigPaths,
    ) -> None:
        """Nested mappings merge per key across files."""
        config_paths.user.write_text(
            "proxy:\n  host: a.example.com\n  port: 8080\n", encoding="utf-8"
        )
        config_paths.project.write_text("proxy:\n  host: b.example.com\n", encoding="utf-8")

        assert make_resolver().get("proxy") == {"host": "b.example.com", "port": 8080}
