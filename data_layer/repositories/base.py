"""
Common plumbing for repositories.

A repository turns one domain access pattern into one store call. It applies
no business rules and never retries; the only thing it adds is translating
store failures into StorageError.
"""

import logging
from typing import Any, Awaitable, Optional, TypeVar

from commerce.errors import StorageError
from commerce.remote_store import RemoteStore, RemoteStoreError

logger = logging.getLogger("repository")

R = TypeVar("R")


class Repository:
    """Base class holding the store handle and the error translation."""

    table: str = ""

    def __init__(self, store: RemoteStore):
        self.store = store

    async def _call(self, operation: str, call: Awaitable[R]) -> R:
        """Await a store call, re-raising store failures as StorageError."""
        try:
            return await call
        except RemoteStoreError as e:
            logger.error(f"{operation} on '{self.table}' failed: {e}")
            raise StorageError(str(e), table=self.table, operation=operation) from e

    @staticmethod
    def _first(rows: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
        return rows[0] if rows else None
