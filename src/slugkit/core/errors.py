"""Custom exceptions for slug configuration and generation errors."""

from __future__ import annotations

from typing import Any


class SlugError(Exception):
    """Base exception for all slugkit errors."""


class ConfigurationError(SlugError):
    """Base exception for configuration errors with optional suggestions."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[Configuration Error] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class UnknownSluggerError(ConfigurationError):
    """Error when a slugger name is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        super().__init__(
            f"Unknown slugger '{name}'",
            f"Use one of: {', '.join(available)}, or register it first.",
        )


class InvalidSluggerError(ConfigurationError):
    """Error when an object does not implement the slugger protocol."""

    def __init__(self, slugger: Any) -> None:
        super().__init__(
            f"Slugger {slugger!r} has no callable 'slug(text, separator)' method",
        )


class InvalidScopeError(ConfigurationError):
    """Error when uniqueness scope conditions reference the slug field itself."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            f"Scope conditions must not reference the slug field '{field}'",
            "Remove the slug field from the scope mapping.",
        )


class IncompleteSourceError(SlugError):
    """Raised when a source field is unset or invalid at slug time."""

    def __init__(self, field: str, reason: str = "is not set") -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Source field '{field}' {reason}")


class PersistenceUnavailableError(SlugError):
    """Raised when the existence check cannot reach the storage layer."""


class SlugCollisionError(SlugError):
    """Raised when no free suffix was found within the allowed attempts."""

    def __init__(self, slug: str, attempts: int) -> None:
        self.slug = slug
        self.attempts = attempts
        super().__init__(f"No unique slug for '{slug}' after {attempts} attempts")


class SlugLengthError(SlugError):
    """Raised when a slug cannot be kept within the maximum length."""

    def __init__(self, slug: str, max_length: int, reason: str | None = None) -> None:
        self.slug = slug
        self.max_length = max_length
        super().__init__(reason or f"Slug '{slug}' exceeds {max_length} characters")
