"""Domain exceptions for the record store and its persistence adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from profile_engine.errors import ProfileEngineError

if TYPE_CHECKING:
    from profile_engine.data_models import ProfileRecord


class RecordStoreError(ProfileEngineError):
    """Base error for record store operations."""


class ValidationError(RecordStoreError):
    """
    Raised when a draft fails field validation.

    Attributes
    ----------
    field_errors:
        Mapping of field name to a user-facing message, one entry per failing field.
    """

    def __init__(self, field_errors: Mapping[str, str]) -> None:
        self.field_errors: dict[str, str] = dict(field_errors)
        fields = ", ".join(sorted(self.field_errors))
        super().__init__(f"Record failed validation: {fields}")


class NotFoundError(RecordStoreError):
    """Raised when a target record is not present in the store."""


class NoSelectionError(RecordStoreError):
    """Raised when an operation needs a selected record and none is selected."""


class PersistenceError(RecordStoreError):
    """
    Raised when the in-memory change was applied but could not be written.

    Attributes
    ----------
    cause:
        The adapter failure that prevented the write.
    record:
        The record committed (or removed) in memory by the failed operation.
    """

    def __init__(self, cause: BaseException, record: ProfileRecord | None = None) -> None:
        self.cause = cause
        self.record = record
        super().__init__(f"Saved copy may be stale: {cause}")


class StorageIOError(ProfileEngineError):
    """Raised by key-value adapters when a load or save cannot complete."""
