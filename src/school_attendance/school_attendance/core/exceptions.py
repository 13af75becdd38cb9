from __future__ import annotations

from .enums import EntityKind, ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind: ErrorKind = ErrorKind.INVALID_REQUEST


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or out of range."""

    kind = ErrorKind.INVALID_REQUEST


class NotFoundError(DomainError):
    """Raised when a referenced class, teacher or student does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: EntityKind, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.value} with ID {entity_id} not found.")


class InvalidStateError(DomainError):
    """Raised when an entity exists but cannot take part in the operation."""

    kind = ErrorKind.INVALID_STATE

    NO_TIMETABLE = "NoTimetable"

    def __init__(self, reason: str, message: str):
        self.reason = reason
        super().__init__(message)


class NoRecordsError(DomainError):
    """Raised when a query target exists but no attendance rows match."""

    kind = ErrorKind.NO_RECORDS


class ConfigurationError(Exception):
    """Raised at start-up when required settings are missing."""
