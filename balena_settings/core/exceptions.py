"""
Custom exception classes for balena settings resolution.

Only genuinely fatal conditions are exceptions here. A missing config
file and an unknown setting name are both normal outcomes and never
raise. I/O failures other than absence propagate as the unchanged
``OSError`` and are not wrapped.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class BalenaSettingsError(Exception):
    """
    Base exception for all settings errors.

    Attributes:
        message: Human-readable error description.
        details: Additional context about the error.
        error_code: Optional error code for categorization.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "error_code": self.error_code,
        }


class ConfigurationError(BalenaSettingsError):
    """
    Exception raised for configuration-related errors.

    Raised when:
    - A configuration source is malformed
    - A configuration source cannot be turned into a flat mapping
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_file: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error description.
            config_key: The configuration key that caused the error.
            config_file: Path to the configuration file.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if config_file:
            details["config_file"] = config_file

        kwargs.setdefault("error_code", "CONFIG_ERROR")
        super().__init__(message, details=details, **kwargs)
        self.config_file = config_file


class SettingsParseError(ConfigurationError):
    """
    Exception raised when an existing config file is not valid YAML.

    The message always names the offending file, followed by the
    underlying parser message.
    """

    def __init__(
        self,
        config_file: str,
        parser_message: str,
        **kwargs: Any,
    ) -> None:
        """
        Initialize parse error.

        Args:
            config_file: Path to the file that failed to parse.
            parser_message: Message reported by the YAML parser.
            **kwargs: Additional arguments passed to parent.
        """
        details = kwargs.pop("details", {})
        details["parser_message"] = parser_message

        super().__init__(
            f"Error parsing config file {config_file}: {parser_message}",
            config_file=config_file,
            details=details,
            error_code="PARSE_ERROR",
            **kwargs,
        )
        self.parser_message = parser_message
