"""Shared domain error messages and error types."""

from typing import Iterable


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class StructuralError(DomainError):
    """Input is structurally unusable (bad headers, empty file, empty id set)."""


class ImportTooLargeError(StructuralError):
    """Accepted record count exceeds the import ceiling."""


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class RowValidationError(ValidationError):
    """Validation failure tied to a source row."""

    def __init__(self, row_number: int, reason: str):
        super().__init__(f"Row {row_number}: {reason}")
        self.row_number = row_number
        self.reason = reason


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PartialBatchFailure(DomainError):
    """Some bulk-delete batches failed while others succeeded."""

    def __init__(self, message: str, report):
        super().__init__(message)
        self.report = report


class StoreError(DomainError):
    """Unexpected failure reported by the registry store."""


class StoreLimitError(StoreError):
    """A single store call exceeded the store's record-count limit."""


class ConfigurationError(DomainError):
    """Invalid configuration value."""


def http_status_for(error: Exception) -> int:
    """Map an error to the status code an HTTP wrapper should return."""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    if isinstance(error, (StructuralError, ValidationError)):
        return 400
    return 500


def registrant_not_found(registrant_id: int) -> str:
    """Return message for missing registrant."""
    return f"Registrant {registrant_id} not found"


def registrants_not_found(ids: Iterable[int]) -> str:
    """Return message for a set of missing registrants."""
    return f"The following IDs were not found: {', '.join(str(i) for i in ids)}"


def missing_required_columns(missing: Iterable[str]) -> str:
    """Return message for a header row lacking required fields."""
    return f"Missing required columns: {', '.join(missing)}"


def duplicate_registrant(phone: str | None, vpa: str) -> str:
    """Return message for a registrant that violates the unique key."""
    if phone:
        return f"Registrant with phone '{phone}' and VPA '{vpa}' already exists"
    return f"Registrant with VPA '{vpa}' already exists"


def import_too_large(count: int, ceiling: int) -> str:
    """Return message when an import exceeds the record ceiling."""
    return f"Too many records: {count} accepted, maximum {ceiling} allowed per import"


def store_limit_exceeded(operation: str, count: int, limit: int) -> str:
    """Return message when a store call exceeds its per-call cap."""
    return f"{operation} received {count} records, store allows at most {limit} per call"
