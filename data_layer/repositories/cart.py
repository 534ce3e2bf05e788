"""Cart queries. One row per (user, product); the store enforces that pair as unique."""

from typing import Any, Optional

from commerce.remote_store import Query
from data_layer.repositories.base import Repository

CART_COLUMNS = ("id", "product_id", "quantity", "added_at")
ON_CONFLICT = ("user_id", "product_id")


class CartRepository(Repository):
    """Access to the `cart` collection, always scoped by user."""

    table = "cart"

    async def find_by_user_id(self, user_id: str) -> list[dict[str, Any]]:
        """Cart rows with the referenced product embedded under `products`."""
        return await self._call(
            "find_by_user_id",
            self.store.select(
                Query(
                    self.table,
                    filters={"user_id": user_id},
                    columns=CART_COLUMNS,
                    embed={"products": ("product_id", "products")},
                    order_by="added_at",
                )
            ),
        )

    async def find_item(self, user_id: str, product_id: str) -> Optional[dict[str, Any]]:
        rows = await self._call(
            "find_item",
            self.store.select(
                Query(
                    self.table,
                    filters={"user_id": user_id, "product_id": product_id},
                    columns=CART_COLUMNS,
                    limit=1,
                )
            ),
        )
        return self._first(rows)

    async def upsert(self, user_id: str, product_id: str, quantity: int = 1) -> dict[str, Any]:
        """Insert the row, or overwrite its quantity if the pair already exists."""
        return await self._call(
            "upsert",
            self.store.upsert(
                self.table,
                {"user_id": user_id, "product_id": product_id, "quantity": quantity},
                on_conflict=ON_CONFLICT,
            ),
        )

    async def update_quantity(self, user_id: str, product_id: str, quantity: int) -> list[dict[str, Any]]:
        return await self._call(
            "update_quantity",
            self.store.update(
                self.table,
                {"quantity": quantity},
                filters={"user_id": user_id, "product_id": product_id},
            ),
        )

    async def remove(self, user_id: str, product_id: str) -> int:
        return await self._call(
            "remove",
            self.store.delete(self.table, {"user_id": user_id, "product_id": product_id}),
        )

    async def clear(self, user_id: str) -> int:
        return await self._call("clear", self.store.delete(self.table, {"user_id": user_id}))
