"""
Error types for the cascadewind resolution engine.

Domain outcomes (undefined variables, circular references, unsupported
selectors) are reported as result values, not exceptions. The classes here
cover programming errors and unreadable configuration.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class CascadewindError(Exception):
    """Base exception for all cascadewind errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class InvalidVariableError(CascadewindError):
    """
    Raised when a custom-property definition is malformed.

    Examples:
    - Name missing the ``--`` sigil
    - Negative source order
    """

    pass


class ConfigError(CascadewindError):
    """
    Raised when an engine configuration file cannot be used.

    Examples:
    - TOML syntax errors
    - Unknown or mistyped settings
    """

    pass


@dataclass
class ErrorContext:
    """
    Source location attached to an error.

    Attributes:
        file: Path to the file the error relates to
        key: Optional dotted key inside the file (e.g. ``tool.cascadewind.screens``)
    """

    file: Path
    key: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "pyproject.toml [tool.cascadewind]"
        """
        if self.key:
            return f"{self.file} [{self.key}]"
        return str(self.file)


def make_config_error(message: str, file: Path, key: str | None = None) -> ConfigError:
    """Create a ConfigError with location context."""
    return ConfigError(message, ErrorContext(file=file, key=key))
