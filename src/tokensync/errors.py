"""
Error types for tokensync loading, configuration, and rendering.

Lookups that can legitimately find nothing (a deleted variable, a node
removed from the canvas) return ``None`` instead of raising. The classes
here cover the failures that callers are expected to report.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class TokenSyncError(Exception):
    """Base exception for all tokensync errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class DocumentLoadError(TokenSyncError):
    """
    Raised when a source document file cannot be loaded.

    Examples:
    - File is not valid JSON
    - A style is missing its name
    """

    pass


class ConfigError(TokenSyncError):
    """
    Raised when tokensync.toml contains invalid settings.

    Examples:
    - Negative poll interval
    - Unknown log level
    """

    pass


class RenderError(TokenSyncError):
    """Raised when a renderer fails to produce a row for an entity."""

    pass


class UnknownCommandError(TokenSyncError):
    """Raised when an inbound UI message has an unrecognised type."""

    pass


@dataclass
class ErrorContext:
    """
    Where an error came from.

    Attributes:
        file: Path to the file being processed
        entity: Optional style name or variable id involved
    """

    file: Path | None = None
    entity: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "tokens.json (Brand/Primary)"
        """
        parts = []
        if self.file is not None:
            parts.append(str(self.file))
        if self.entity:
            parts.append(f"({self.entity})")
        return " ".join(parts)
