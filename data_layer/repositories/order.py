"""Order history queries."""

from typing import Any, Sequence

from commerce.remote_store import Query
from data_layer.repositories.base import Repository

ITEMS_TABLE = "order_items"


class OrderRepository(Repository):
    """Access to `orders` and `order_items`."""

    table = "orders"

    async def create(self, order: dict[str, Any]) -> dict[str, Any]:
        return await self._call("create", self.store.insert(self.table, order))

    async def add_items(self, items: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        return await self._call("add_items", self.store.insert_many(ITEMS_TABLE, items))

    async def find_by_user_id(self, user_id: str) -> list[dict[str, Any]]:
        """A user's orders, newest first."""
        return await self._call(
            "find_by_user_id",
            self.store.select(
                Query(
                    self.table,
                    filters={"user_id": user_id},
                    order_by="created_at",
                    descending=True,
                )
            ),
        )

    async def find_items_by_order_ids(self, order_ids: Sequence[str]) -> list[dict[str, Any]]:
        """Items of several orders with name and category of their product."""
        return await self._call(
            "find_items_by_order_ids",
            self.store.select(
                Query(
                    ITEMS_TABLE,
                    in_filters={"order_id": list(order_ids)},
                    embed={"products": ("product_id", "products")},
                    order_by="created_at",
                )
            ),
        )
