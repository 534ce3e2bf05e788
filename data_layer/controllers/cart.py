"""
Cart controller.

Every mutation writes through the repository and then reloads the whole cart
with get_cart_items, which broadcasts the fresh snapshot. Subscribers therefore
only ever see state the store has confirmed, at the cost of one extra read per
write. clear_cart is the one exception: the result is known to be empty, so it
broadcasts that directly.
"""

import logging
from typing import Any, Iterable

from commerce.models import CartItem
from data_layer.controllers.rules import field_of, require_quantity
from data_layer.factory import ModelFactory
from data_layer.observer import Subject
from data_layer.repositories.cart import CartRepository

logger = logging.getLogger("cart_controller")


class CartController:
    """
    Cart use cases.

    Example:
        cart = CartController(CartRepository(store), Subject("cart"))
        items = await cart.add_to_cart("user-1", "prod-001", 2)
        total = cart.calculate_total(items)
    """

    def __init__(
        self,
        repository: CartRepository,
        subject: Subject[list[CartItem]],
        factory: type[ModelFactory] = ModelFactory,
    ):
        self.repository = repository
        self.subject = subject
        self.factory = factory

    async def get_cart_items(self, user_id: str) -> list[CartItem]:
        """Load the cart, broadcast it and return it."""
        data = await self.repository.find_by_user_id(user_id)
        items = self.factory.create_cart_items(data)
        self.subject.notify(items)
        return items

    async def add_to_cart(self, user_id: str, product_id: str, quantity: int = 1) -> list[CartItem]:
        """
        Add `quantity` units of a product.

        If the product is already in the cart its quantity grows; there is
        never a second row for the same product.
        """
        require_quantity(quantity)
        existing = await self.repository.find_item(user_id, product_id)
        new_quantity = quantity + (existing["quantity"] if existing else 0)

        await self.repository.upsert(user_id, product_id, new_quantity)
        logger.info(f"Cart {user_id}: {product_id} -> quantity {new_quantity}")
        return await self.get_cart_items(user_id)

    async def update_quantity(self, user_id: str, product_id: str, quantity: int) -> list[CartItem]:
        """Set a product's quantity. Zero removes the product."""
        require_quantity(quantity, minimum=0)
        if quantity == 0:
            return await self.remove_from_cart(user_id, product_id)

        await self.repository.update_quantity(user_id, product_id, quantity)
        logger.info(f"Cart {user_id}: {product_id} set to {quantity}")
        return await self.get_cart_items(user_id)

    async def remove_from_cart(self, user_id: str, product_id: str) -> list[CartItem]:
        await self.repository.remove(user_id, product_id)
        logger.info(f"Cart {user_id}: removed {product_id}")
        return await self.get_cart_items(user_id)

    async def clear_cart(self, user_id: str) -> list[CartItem]:
        await self.repository.clear(user_id)
        logger.info(f"Cart {user_id}: cleared")
        items: list[CartItem] = []
        self.subject.notify(items)
        return items

    @staticmethod
    def calculate_total(items: Iterable[Any]) -> float:
        """
        Sum of price x quantity.

        Accepts CartItem objects or mappings; a missing price counts as 0 and
        a missing quantity as 1.
        """
        total = 0.0
        for item in items:
            price = field_of(item, "price") or 0
            quantity = field_of(item, "quantity") or 1
            total += price * quantity
        return total
