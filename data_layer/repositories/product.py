"""Product catalog queries."""

from typing import Any, Optional

from commerce.remote_store import Query
from data_layer.repositories.base import Repository

SEARCH_COLUMNS = ("name", "description", "barcode")


class ProductRepository(Repository):
    """Read-only access to the `products` collection."""

    table = "products"

    async def find_all(self) -> list[dict[str, Any]]:
        return await self._call(
            "find_all", self.store.select(Query(self.table, order_by="name"))
        )

    async def find_by_id(self, product_id: str) -> Optional[dict[str, Any]]:
        rows = await self._call(
            "find_by_id",
            self.store.select(Query(self.table, filters={"id": product_id}, limit=1)),
        )
        return self._first(rows)

    async def find_by_category(self, category: str) -> list[dict[str, Any]]:
        return await self._call(
            "find_by_category",
            self.store.select(
                Query(self.table, filters={"category": category}, order_by="name")
            ),
        )

    async def search(self, term: str) -> list[dict[str, Any]]:
        """Products whose name, description or barcode contains `term`."""
        return await self._call(
            "search",
            self.store.select(
                Query(self.table, search=(SEARCH_COLUMNS, term), order_by="name")
            ),
        )

    async def find_by_barcode(self, barcode: str) -> Optional[dict[str, Any]]:
        """Exact barcode match."""
        rows = await self._call(
            "find_by_barcode",
            self.store.select(Query(self.table, filters={"barcode": barcode}, limit=1)),
        )
        return self._first(rows)

    async def find_all_categories(self) -> list[str]:
        rows = await self._call(
            "find_all_categories",
            self.store.select(
                Query(self.table, columns=("category",), order_by="category")
            ),
        )
        # Rows arrive sorted, so first-seen order is sorted order
        return list(dict.fromkeys(row["category"] for row in rows))
