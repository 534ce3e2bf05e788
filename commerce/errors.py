"""
Error taxonomy for the storefront data layer.

Repositories raise StorageError, the model factory raises ValidationError and
the shopping list controller raises StateTransitionError. Nothing in the data
layer catches these; they propagate to the UI boundary (see api/main.py),
which turns them into user-visible responses.
"""

from typing import Optional


class DataLayerError(Exception):
    """Base class for every error raised by the data layer."""


class StorageError(DataLayerError):
    """
    A call to the remote store failed.

    Covers network failures, constraint violations and records that are
    required but missing. The store's own diagnostic message is kept as the
    error message.
    """

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.table = table
        self.operation = operation

    def __str__(self) -> str:
        if self.table and self.operation:
            return f"{self.operation} on '{self.table}' failed: {self.message}"
        return self.message


class RecordNotFoundError(StorageError):
    """A lookup that the caller depends on matched no record."""


class ValidationError(DataLayerError):
    """Raw input could not be turned into a valid domain object."""


class StateTransitionError(DataLayerError):
    """A status change that is not a legal forward edge was requested."""

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move shopping list from '{current}' to '{target}'")
        self.current = current
        self.target = target
