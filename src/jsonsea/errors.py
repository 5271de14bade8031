"""
Error taxonomy for jsonsea.

Everything raised on purpose derives from JsonSeaError so callers at the
boundary (CLI, import flows) can catch one type and keep the current tree.
"""

from __future__ import annotations


class JsonSeaError(Exception):
    """Base class for all jsonsea errors."""


class JsonParseError(JsonSeaError, ValueError):
    """Input text is not syntactically valid JSON."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        if line is not None and column is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class UnsupportedValueKind(JsonSeaError, TypeError):
    """A decoded value is not one of the JSON kinds."""

    def __init__(self, value: object, reason: str | None = None):
        self.value = value
        message = f"Unsupported value kind: {type(value).__name__}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class FetchError(JsonSeaError):
    """A remote fetch failed or answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class EmptyResultError(JsonSeaError):
    """An import produced zero documents."""


class InvalidImportError(JsonSeaError):
    """An import source returned something other than an object or array."""
