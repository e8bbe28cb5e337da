"""
Custom exceptions for the recipe search domain.

These exceptions represent domain-level errors and are independent
of infrastructure concerns (HTTP, file system, etc.).
"""

from typing import Any, Optional


class RecipeSearchException(Exception):
    """Base exception for all recipe search errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidRecordException(RecipeSearchException):
    """Raised when a candidate record cannot be turned into a searchable view."""

    def __init__(self, record: Any, reason: Optional[str] = None):
        message = f"Invalid recipe record of type {type(record).__name__}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            details={"record_type": type(record).__name__, "reason": reason},
        )


class CatalogLoadException(RecipeSearchException):
    """Raised when the recipe catalog file cannot be read or decoded."""

    def __init__(self, path: str, reason: Optional[str] = None):
        message = f"Failed to load recipe catalog from '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, details={"path": path, "reason": reason})
