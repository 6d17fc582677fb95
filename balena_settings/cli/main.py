#!/usr/bin/env python3
"""
Command line entry point for balena settings.

Provides commands for:
- Reading a single setting
- Listing all resolved settings
- Showing where settings are read from
"""

from __future__ import annotations

import json
import sys
from typing import Any, Callable

import click
import yaml

from balena_settings.config.client import get_client_settings
from balena_settings.config.logging_config import get_logger, setup_logging
from balena_settings.core.exceptions import BalenaSettingsError
from balena_settings.core.resolver import SettingsResolver, SourceKind
from balena_settings.settings import get_resolver


logger = get_logger(__name__)


def get_version() -> str:
    """Get package version."""
    from balena_settings import __version__
    return __version__


def _resolver(ctx: click.Context) -> SettingsResolver:
    resolver = ctx.obj.get("resolver")
    if resolver is None:
        resolver = get_resolver()
        ctx.obj["resolver"] = resolver
    return resolver


def _load(ctx: click.Context, fetch: Callable[[SettingsResolver], Any]) -> Any:
    """Run a resolver call, exiting with status 1 when settings cannot be loaded."""
    try:
        return fetch(_resolver(ctx))
    except BalenaSettingsError as e:
        logger.debug(f"Settings resolution failed: {e.to_dict()}")
        click.echo(click.style(f"Failed to load settings: {e.message}", fg="red"), err=True)
        ctx.exit(1)
    except OSError as e:
        click.echo(click.style(f"Failed to read settings: {e}", fg="red"), err=True)
        ctx.exit(1)


def _format_value(value: Any, output_format: str) -> str:
    if output_format == "json":
        return json.dumps(value, indent=2, default=str)
    if output_format == "yaml" or isinstance(value, (dict, list)):
        dumped = yaml.safe_dump(value, default_flow_style=False, sort_keys=False).rstrip("\n")
        # plain scalars get a document end marker
        if dumped.endswith("\n..."):
            dumped = dumped[: -len("\n...")]
        return dumped
    return str(value)


@click.group(invoke_without_command=True)
@click.option("-v", "--version", is_flag=True, help="Show version and exit")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, version: bool, debug: bool) -> None:
    """balena settings - resolve balena configuration."""
    ctx.ensure_object(dict)

    if version:
        click.echo(f"balena-settings, version {get_version()}")
        ctx.exit(0)

    client = get_client_settings()
    setup_logging(
        level="DEBUG" if debug else client.log_level,
        log_file=client.log_file,
        json_format=client.log_json,
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("get")
@click.argument("name")
@click.option("--format", "output_format", type=click.Choice(["text", "json", "yaml"]), default="text")
@click.pass_context
def get_command(ctx: click.Context, name: str, output_format: str) -> None:
    """Print the value of a single setting."""
    settings = _load(ctx, lambda resolver: resolver.get_all())

    if name not in settings:
        click.echo(click.style(f"Unknown setting: {name}", fg="yellow"), err=True)
        ctx.exit(1)

    click.echo(_format_value(settings[name], output_format))


@cli.command("list")
@click.option("--format", "output_format", type=click.Choice(["yaml", "json"]), default="yaml")
@click.pass_context
def list_command(ctx: click.Context, output_format: str) -> None:
    """Print every resolved setting."""
    settings = _load(ctx, lambda resolver: resolver.get_all())
    ordered = dict(sorted(settings.items(), key=lambda item: str(item[0])))
    click.echo(_format_value(ordered, output_format))


@cli.command("sources")
@click.pass_context
def sources_command(ctx: click.Context) -> None:
    """Show configuration sources, lowest precedence first."""
    resolver = _resolver(ctx)

    for source in resolver.sources:
        if source.kind is SourceKind.FILE:
            exists = source.path is not None and source.path.exists()
            status = click.style("found", fg="green") if exists else click.style("missing", fg="yellow")
            legacy = " (legacy)" if source.legacy else ""
            click.echo(f"{source.rank}. {source.name}: {source.path}{legacy} [{status}]")
        else:
            click.echo(f"{source.rank}. {source.name}")


def main() -> int:
    """Main entry point."""
    try:
        cli(obj={})
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
