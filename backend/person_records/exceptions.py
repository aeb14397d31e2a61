"""Custom exceptions for person record operations."""

from typing import Any


class PersonRecordsError(Exception):
    """Base exception for person record errors."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class ConfigurationError(PersonRecordsError):
    """Settings could not be loaded."""

    pass


class ValidationError(PersonRecordsError):
    """Record failed model validation."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        index: int | None = None,
    ):
        super().__init__(message, operation=operation)
        self.errors = errors or []
        self.index = index


class InvalidIdentifierError(PersonRecordsError):
    """Malformed document id supplied to an id-based operation."""

    def __init__(self, identifier: Any, operation: str | None = None):
        super().__init__(f"Invalid person id format: {identifier!r}", operation=operation)
        self.identifier = identifier


class StorageError(PersonRecordsError):
    """Underlying database call failed."""

    pass
