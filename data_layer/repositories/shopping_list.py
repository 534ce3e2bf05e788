"""Shopping list and shopping list item queries."""

from typing import Any, Optional

from commerce.models import ShoppingListStatus
from commerce.remote_store import Query, utc_now_iso
from data_layer.repositories.base import Repository

ITEMS_TABLE = "shopping_list_items"
ITEM_ON_CONFLICT = ("list_id", "product_id")


class ShoppingListRepository(Repository):
    """
    Access to `shopping_lists` and `shopping_list_items`.

    Lists are always addressed by owner or by list id; items by list id or by
    item id.
    """

    table = "shopping_lists"

    # =========================================================================
    # Lists
    # =========================================================================

    async def find_by_user_id(
        self, user_id: str, status: Optional[str] = None
    ) -> list[dict[str, Any]]:
        """A user's lists, newest first, optionally filtered by status."""
        filters = {"user_id": user_id}
        if status:
            filters["status"] = status
        return await self._call(
            "find_by_user_id",
            self.store.select(
                Query(self.table, filters=filters, order_by="created_at", descending=True)
            ),
        )

    async def find_by_id(self, list_id: str) -> Optional[dict[str, Any]]:
        rows = await self._call(
            "find_by_id",
            self.store.select(Query(self.table, filters={"id": list_id}, limit=1)),
        )
        return self._first(rows)

    async def create(self, user_id: str, name: str) -> dict[str, Any]:
        return await self._call(
            "create",
            self.store.insert(
                self.table,
                {
                    "user_id": user_id,
                    "name": name,
                    "status": ShoppingListStatus.PREVIOUS.value,
                },
            ),
        )

    async def update_status(self, list_id: str, status: str) -> Optional[dict[str, Any]]:
        rows = await self._call(
            "update_status",
            self.store.update(
                self.table,
                {"status": status, "updated_at": utc_now_iso()},
                filters={"id": list_id},
            ),
        )
        return self._first(rows)

    async def delete(self, list_id: str) -> int:
        """Delete a list; the store cascades to its items."""
        return await self._call("delete", self.store.delete(self.table, {"id": list_id}))

    # =========================================================================
    # Items
    # =========================================================================

    async def find_items_by_list_id(self, list_id: str) -> list[dict[str, Any]]:
        """Items of a list with the referenced product embedded under `products`."""
        return await self._call(
            "find_items_by_list_id",
            self.store.select(
                Query(
                    ITEMS_TABLE,
                    filters={"list_id": list_id},
                    embed={"products": ("product_id", "products")},
                    order_by="created_at",
                )
            ),
        )

    async def add_item(self, list_id: str, product_id: str, quantity: int = 1) -> dict[str, Any]:
        """Insert the item, or overwrite its quantity if the product is already listed."""
        return await self._call(
            "add_item",
            self.store.upsert(
                ITEMS_TABLE,
                {"list_id": list_id, "product_id": product_id, "quantity": quantity},
                on_conflict=ITEM_ON_CONFLICT,
            ),
        )

    async def update_item_quantity(self, item_id: str, quantity: int) -> list[dict[str, Any]]:
        return await self._call(
            "update_item_quantity",
            self.store.update(ITEMS_TABLE, {"quantity": quantity}, filters={"id": item_id}),
        )

    async def remove_item(self, item_id: str) -> int:
        return await self._call("remove_item", self.store.delete(ITEMS_TABLE, {"id": item_id}))
