#!/usr/bin/env python3
"""
Basic usage example for balena settings.

Resolves settings for the current user and project directory and prints
where each layer is read from.
"""

from balena_settings import SettingsParseError, SettingsResolver
from balena_settings.config.logging_config import get_logger, setup_logging


def main() -> None:
    """Run basic usage example."""
    setup_logging(level="DEBUG")
    logger = get_logger(__name__)

    resolver = SettingsResolver()

    for source in resolver.sources:
        logger.info(f"Source {source.rank}: {source.name} {source.path or ''}")

    try:
        settings = resolver.get_all()
    except SettingsParseError as e:
        logger.error(f"Invalid config file {e.config_file}: {e.parser_message}")
        return

    for name, value in sorted(settings.items(), key=lambda item: str(item[0])):
        print(f"{name}: {value}")

    print(f"API URL: {resolver.get('apiUrl')}")


if __name__ == "__main__":
    main()
