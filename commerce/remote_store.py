"""
Remote store contract and an in-memory implementation of it.

The data layer talks to a hosted relational store through a small async
create/read/update/delete surface over named collections. This module defines
that surface (`Query` + `RemoteStore`) and ships `InMemoryStore`, a
fixture-backed stand-in used by the demo, the API and the test suite. A real
deployment plugs in a client for the hosted backend with the same methods.

Design decisions:
- Queries are declarative values: collection, filters, ordering, limit
- Every method is one round trip and yields to the event loop
- Failures surface as RemoteStoreError carrying the store's message
- Results are copies; callers can never mutate stored rows
- Unique constraints, foreign keys and cascades mirror the hosted schema
"""

import asyncio
import copy
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol, Sequence
from uuid import uuid4

logger = logging.getLogger("remote_store")

Record = dict[str, Any]


class RemoteStoreError(Exception):
    """Raised by a store when a call fails (network, constraint, unknown table)."""


@dataclass
class Query:
    """
    Declarative read against one collection.

    Attributes:
        table: Collection to read from
        filters: Column equality filters (all must match)
        in_filters: Column membership filters (value must be in the sequence)
        search: (columns, term) - case-insensitive "contains" on any column
        order_by: Column to sort by
        descending: Sort direction
        limit: Maximum number of rows
        columns: Projection; None selects every column
        embed: alias -> (foreign key column, parent table); attaches the
               referenced parent record under `alias`
    """
    table: str
    filters: dict[str, Any] = field(default_factory=dict)
    in_filters: dict[str, Sequence[Any]] = field(default_factory=dict)
    search: Optional[tuple[tuple[str, ...], str]] = None
    order_by: Optional[str] = None
    descending: bool = False
    limit: Optional[int] = None
    columns: Optional[tuple[str, ...]] = None
    embed: dict[str, tuple[str, str]] = field(default_factory=dict)


class RemoteStore(Protocol):
    """The async CRUD surface the repositories depend on."""

    async def select(self, query: Query) -> list[Record]: ...

    async def insert(self, table: str, record: Record) -> Record: ...

    async def insert_many(self, table: str, records: Sequence[Record]) -> list[Record]: ...

    async def upsert(
        self, table: str, record: Record, on_conflict: tuple[str, ...]
    ) -> Record: ...

    async def update(
        self, table: str, changes: Record, filters: dict[str, Any]
    ) -> list[Record]: ...

    async def delete(self, table: str, filters: dict[str, Any]) -> int: ...


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# Column stamped with the insert time, per collection
TIMESTAMP_COLUMNS = {
    "products": ("created_at",),
    "cart": ("added_at",),
    "shopping_lists": ("created_at", "updated_at"),
    "shopping_list_items": ("created_at",),
    "orders": ("created_at",),
    "order_items": ("created_at",),
}

UNIQUE_CONSTRAINTS = {
    "cart": [("user_id", "product_id")],
    "shopping_list_items": [("list_id", "product_id")],
}

# child table -> [(foreign key column, parent table)]
FOREIGN_KEYS = {
    "cart": [("product_id", "products")],
    "shopping_list_items": [("list_id", "shopping_lists"), ("product_id", "products")],
    "order_items": [("order_id", "orders"), ("product_id", "products")],
}

# parent table -> [(child table, foreign key column)]
CASCADES = {
    "shopping_lists": [("shopping_list_items", "list_id")],
    "orders": [("order_items", "order_id")],
}


class InMemoryStore:
    """
    Dict-of-lists store implementing the RemoteStore protocol.

    Seed data is loaded from `<table>.json` files in `data_dir` (missing files
    mean an empty collection), the same way fixtures were always loaded for
    demos. Writes only live in memory.

    Example:
        store = InMemoryStore(data_dir=Path("data"))
        rows = await store.select(Query("products", order_by="name"))
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        latency: float = 0.0,
        tables: Iterable[str] = tuple(TIMESTAMP_COLUMNS),
    ):
        """
        Initialize the store.

        Args:
            data_dir: Directory containing JSON seed fixtures, or None for an
                      empty store
            latency: Simulated round-trip time in seconds
            tables: Collections this store knows about
        """
        self.latency = latency
        self._tables: dict[str, list[Record]] = {name: [] for name in tables}
        self._pending_failure: Optional[tuple[Optional[str], str]] = None
        self.call_count = 0

        if data_dir is not None:
            self.load_fixtures(Path(data_dir))

    # =========================================================================
    # Seeding and test hooks
    # =========================================================================

    def load_fixtures(self, data_dir: Path) -> None:
        """Load `<table>.json` for every known collection."""
        for table in self._tables:
            filepath = data_dir / f"{table}.json"
            if not filepath.exists():
                continue
            with open(filepath, "r") as f:
                self.seed(table, json.load(f))

    def seed(self, table: str, records: Iterable[Record]) -> None:
        """Insert records synchronously, bypassing constraints and latency."""
        rows = self._table(table)
        for record in records:
            rows.append(self._with_defaults(table, record))
        logger.debug(f"Seeded '{table}' ({len(rows)} rows)")

    def inject_failure(self, message: str, table: Optional[str] = None) -> None:
        """
        Make the next call fail with `message`.

        With `table` set, only the next call touching that collection fails.
        """
        self._pending_failure = (table, message)

    def rows(self, table: str) -> list[Record]:
        """Copy of a collection's raw rows (for assertions)."""
        return copy.deepcopy(self._table(table))

    # =========================================================================
    # RemoteStore protocol
    # =========================================================================

    async def select(self, query: Query) -> list[Record]:
        await self._round_trip(query.table)
        rows = [r for r in self._table(query.table) if self._matches(r, query.filters)]

        for column, allowed in query.in_filters.items():
            rows = [r for r in rows if r.get(column) in allowed]

        if query.search is not None:
            columns, term = query.search
            needle = term.lower()
            rows = [
                r for r in rows
                if any(needle in str(r.get(c) or "").lower() for c in columns)
            ]

        if query.order_by is not None:
            key = query.order_by
            # None sorts last regardless of direction; ties follow insertion order
            present = [(i, r) for i, r in enumerate(rows) if r.get(key) is not None]
            missing = [r for r in rows if r.get(key) is None]
            present.sort(key=lambda pair: (pair[1][key], pair[0]), reverse=query.descending)
            rows = [r for _, r in present] + missing

        if query.limit is not None:
            rows = rows[: query.limit]

        results = []
        for row in rows:
            result = copy.deepcopy(row)
            for alias, (fk_column, parent_table) in query.embed.items():
                result[alias] = self._find_by_id(parent_table, row.get(fk_column))
            if query.columns is not None:
                keep = set(query.columns) | set(query.embed)
                result = {k: v for k, v in result.items() if k in keep}
            results.append(result)
        return results

    async def insert(self, table: str, record: Record) -> Record:
        await self._round_trip(table)
        row = self._with_defaults(table, record)
        self._check_foreign_keys(table, row)
        self._check_unique(table, row)
        self._table(table).append(row)
        return copy.deepcopy(row)

    async def insert_many(self, table: str, records: Sequence[Record]) -> list[Record]:
        await self._round_trip(table)
        rows = [self._with_defaults(table, r) for r in records]
        # All-or-nothing: validate against existing rows and each other first
        staged: list[Record] = []
        for row in rows:
            self._check_foreign_keys(table, row)
            self._check_unique(table, row, extra=staged)
            staged.append(row)
        self._table(table).extend(staged)
        return copy.deepcopy(staged)

    async def upsert(
        self, table: str, record: Record, on_conflict: tuple[str, ...]
    ) -> Record:
        await self._round_trip(table)
        key = {column: record.get(column) for column in on_conflict}
        for row in self._table(table):
            if self._matches(row, key):
                self._check_foreign_keys(table, {**row, **record})
                row.update(record)
                return copy.deepcopy(row)
        row = self._with_defaults(table, record)
        self._check_foreign_keys(table, row)
        self._check_unique(table, row)
        self._table(table).append(row)
        return copy.deepcopy(row)

    async def update(
        self, table: str, changes: Record, filters: dict[str, Any]
    ) -> list[Record]:
        await self._round_trip(table)
        matching = [r for r in self._table(table) if self._matches(r, filters)]
        for row in matching:
            self._check_foreign_keys(table, {**row, **changes})
        updated = []
        for row in matching:
            row.update(changes)
            updated.append(copy.deepcopy(row))
        return updated

    async def delete(self, table: str, filters: dict[str, Any]) -> int:
        await self._round_trip(table)
        rows = self._table(table)
        doomed = [r for r in rows if self._matches(r, filters)]
        self._tables[table] = [r for r in rows if not self._matches(r, filters)]

        for child_table, fk_column in CASCADES.get(table, []):
            doomed_ids = {r["id"] for r in doomed}
            self._tables[child_table] = [
                r for r in self._table(child_table) if r.get(fk_column) not in doomed_ids
            ]
        return len(doomed)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _round_trip(self, table: str) -> None:
        self.call_count += 1
        await asyncio.sleep(self.latency)

        if self._pending_failure is not None:
            failing_table, message = self._pending_failure
            if failing_table is None or failing_table == table:
                self._pending_failure = None
                raise RemoteStoreError(message)

        if table not in self._tables:
            raise RemoteStoreError(f'relation "{table}" does not exist')

    def _table(self, table: str) -> list[Record]:
        try:
            return self._tables[table]
        except KeyError:
            raise RemoteStoreError(f'relation "{table}" does not exist') from None

    def _with_defaults(self, table: str, record: Record) -> Record:
        row = copy.deepcopy(record)
        row.setdefault("id", str(uuid4()))
        now = utc_now_iso()
        for column in TIMESTAMP_COLUMNS.get(table, ()):
            row.setdefault(column, now)
        return row

    def _check_unique(
        self, table: str, row: Record, extra: Sequence[Record] = ()
    ) -> None:
        existing = list(self._table(table)) + list(extra)
        if any(r["id"] == row["id"] for r in existing):
            raise RemoteStoreError(
                f'duplicate key value violates unique constraint "{table}_pkey"'
            )
        for columns in UNIQUE_CONSTRAINTS.get(table, []):
            key = {c: row.get(c) for c in columns}
            if any(self._matches(r, key) for r in existing):
                name = "_".join((table,) + columns)
                raise RemoteStoreError(
                    f'duplicate key value violates unique constraint "{name}_key"'
                )

    def _check_foreign_keys(self, table: str, row: Record) -> None:
        for column, parent_table in FOREIGN_KEYS.get(table, []):
            value = row.get(column)
            if value is not None and self._find_by_id(parent_table, value) is None:
                raise RemoteStoreError(
                    f'insert or update on table "{table}" violates foreign key constraint '
                    f'"{table}_{column}_fkey": Key ({column})=({value}) is not present '
                    f'in table "{parent_table}"'
                )

    def _find_by_id(self, table: str, record_id: Any) -> Optional[Record]:
        for row in self._table(table):
            if row.get("id") == record_id:
                return copy.deepcopy(row)
        return None

    @staticmethod
    def _matches(row: Record, filters: dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in filters.items())
