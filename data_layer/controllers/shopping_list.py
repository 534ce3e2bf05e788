"""
Shopping list controller.

Reads broadcast the list collection. Mutations do not reload: they broadcast a
ListEvent tag (created, updated, item_added, ...) and subscribers re-fetch what
they display. Status only moves forward, previous -> ongoing -> completed, and
update_list_status is the single place where it changes.
"""

import logging
from typing import Any, Iterable, Optional, Union

from commerce.errors import RecordNotFoundError, StateTransitionError, ValidationError
from commerce.models import (
    ListAction,
    ListEvent,
    ShoppingList,
    ShoppingListItem,
    ShoppingListStatus,
)
from data_layer.controllers.rules import field_of, require_quantity
from data_layer.factory import ModelFactory
from data_layer.observer import Subject
from data_layer.repositories.shopping_list import ITEMS_TABLE, ShoppingListRepository

logger = logging.getLogger("shopping_list_controller")

ListPayload = Union[list[ShoppingList], ListEvent]


def _parse_status(status: Union[str, ShoppingListStatus]) -> ShoppingListStatus:
    try:
        return ShoppingListStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in ShoppingListStatus)
        raise ValidationError(f"Unknown list status '{status}' (expected one of: {allowed})") from None


class ShoppingListController:
    """Shopping list use cases for the list pages and the scanner."""

    def __init__(
        self,
        repository: ShoppingListRepository,
        subject: Subject[ListPayload],
        factory: type[ModelFactory] = ModelFactory,
    ):
        self.repository = repository
        self.subject = subject
        self.factory = factory

    # =========================================================================
    # Lists
    # =========================================================================

    async def get_lists(
        self, user_id: str, status: Optional[Union[str, ShoppingListStatus]] = None
    ) -> list[ShoppingList]:
        """A user's lists, newest first; broadcasts the collection."""
        status_filter = _parse_status(status).value if status else None
        data = await self.repository.find_by_user_id(user_id, status_filter)
        lists = self.factory.create_shopping_lists(data)
        self.subject.notify(lists)
        return lists

    async def get_list(self, list_id: str) -> Optional[ShoppingList]:
        data = await self.repository.find_by_id(list_id)
        if data is None:
            return None
        return self.factory.create_shopping_list(data)

    async def create_list(self, user_id: str, name: str) -> ShoppingList:
        name = name.strip()
        if not name:
            raise ValidationError("List name must not be blank")

        data = await self.repository.create(user_id, name)
        shopping_list = self.factory.create_shopping_list(data)
        logger.info(f"Created list {shopping_list.id} '{name}' for {user_id}")

        self.subject.notify(
            ListEvent(action=ListAction.CREATED, list_id=shopping_list.id, shopping_list=shopping_list)
        )
        return shopping_list

    async def update_list_status(
        self, list_id: str, status: Union[str, ShoppingListStatus]
    ) -> ShoppingList:
        """
        Move a list to `status`.

        Raises:
            ValidationError: `status` is not a known status
            RecordNotFoundError: no list with this id
            StateTransitionError: `status` is not the direct successor of the
                                  list's current status
        """
        target = _parse_status(status)
        current = await self._require_list(list_id)

        if not current.status.can_transition_to(target):
            raise StateTransitionError(current.status.value, target.value)

        data = await self.repository.update_status(list_id, target.value)
        if data is None:
            # Deleted between the read and the write
            raise RecordNotFoundError(
                f"Shopping list not found: {list_id}",
                table=self.repository.table,
                operation="update_status",
            )
        updated = self.factory.create_shopping_list(data)
        logger.info(f"List {list_id}: {current.status.value} -> {target.value}")

        self.subject.notify(ListEvent(action=ListAction.UPDATED, list_id=list_id, status=target))
        return updated

    async def advance_list(self, list_id: str) -> ShoppingList:
        """Move a list to the next status in its lifecycle."""
        current = await self._require_list(list_id)
        if current.status.successor is None:
            raise StateTransitionError(current.status.value, current.status.value)
        return await self.update_list_status(list_id, current.status.successor)

    async def delete_list(self, list_id: str) -> None:
        await self.repository.delete(list_id)
        logger.info(f"Deleted list {list_id}")
        self.subject.notify(ListEvent(action=ListAction.DELETED, list_id=list_id))

    # =========================================================================
    # Items
    # =========================================================================

    async def get_list_items(self, list_id: str) -> list[ShoppingListItem]:
        data = await self.repository.find_items_by_list_id(list_id)
        return self.factory.create_list_items(data)

    async def add_item_to_list(self, list_id: str, product_id: str, quantity: int = 1) -> None:
        """Put a product on a list; re-adding a listed product replaces its quantity."""
        require_quantity(quantity)
        await self.repository.add_item(list_id, product_id, quantity)
        logger.info(f"List {list_id}: added {product_id} x{quantity}")
        self.subject.notify(
            ListEvent(
                action=ListAction.ITEM_ADDED,
                list_id=list_id,
                product_id=product_id,
                quantity=quantity,
            )
        )

    async def update_item_quantity(self, item_id: str, quantity: int) -> None:
        """
        Set an item's quantity. Zero removes the item; negatives are rejected.

        Raises:
            RecordNotFoundError: no item with this id
        """
        require_quantity(quantity, minimum=0)
        if quantity == 0:
            await self.remove_item_from_list(item_id)
            return

        rows = await self.repository.update_item_quantity(item_id, quantity)
        if not rows:
            raise RecordNotFoundError(
                f"Shopping list item not found: {item_id}",
                table=ITEMS_TABLE,
                operation="update_item_quantity",
            )
        self.subject.notify(
            ListEvent(action=ListAction.ITEM_UPDATED, item_id=item_id, quantity=quantity)
        )

    async def remove_item_from_list(self, item_id: str) -> None:
        await self.repository.remove_item(item_id)
        logger.info(f"Removed list item {item_id}")
        self.subject.notify(ListEvent(action=ListAction.ITEM_REMOVED, item_id=item_id))

    @staticmethod
    def calculate_total(items: Iterable[Any]) -> float:
        """
        Sum of product price x item quantity.

        Items may be ShoppingListItem objects or mappings with the product
        under `product` or `products`. A missing product or price counts as 0.
        """
        total = 0.0
        for item in items:
            product = field_of(item, "product") or field_of(item, "products")
            price = (field_of(product, "price") if product is not None else None) or 0
            total += price * (field_of(item, "quantity") or 0)
        return total

    async def _require_list(self, list_id: str) -> ShoppingList:
        data = await self.repository.find_by_id(list_id)
        if data is None:
            raise RecordNotFoundError(
                f"Shopping list not found: {list_id}",
                table=self.repository.table,
                operation="find_by_id",
            )
        return self.factory.create_shopping_list(data)
