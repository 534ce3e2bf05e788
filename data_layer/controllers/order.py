"""
Order controller: checkout and order history.

Checkout is a plain sequence of store calls (load cart, write order, write
items, clear cart) with no transaction around it, like every other
multi-step operation in the data layer.
"""

import logging
from typing import Union

from commerce.errors import ValidationError
from commerce.models import Order, PaymentMethod
from data_layer.controllers.cart import CartController
from data_layer.factory import ModelFactory
from data_layer.repositories.order import OrderRepository

logger = logging.getLogger("order_controller")


def _parse_payment_method(method: Union[str, PaymentMethod]) -> PaymentMethod:
    try:
        return PaymentMethod(method)
    except ValueError:
        raise ValidationError(f"Unknown payment method '{method}'") from None


class OrderController:
    """Turns a cart into an order and reads a user's order history."""

    def __init__(
        self,
        repository: OrderRepository,
        cart: CartController,
        factory: type[ModelFactory] = ModelFactory,
    ):
        self.repository = repository
        self.cart = cart
        self.factory = factory

    async def checkout(
        self,
        user_id: str,
        payment_method: Union[str, PaymentMethod],
        discount: float = 0.0,
    ) -> Order:
        """
        Place an order for everything in the user's cart, then empty the cart.

        The discount is clamped to the cart subtotal; the amount charged is
        subtotal minus discount.
        """
        method = _parse_payment_method(payment_method)
        if discount < 0:
            raise ValidationError(f"Discount must not be negative, got {discount}")

        items = await self.cart.get_cart_items(user_id)
        if not items:
            raise ValidationError("Cannot check out an empty cart")

        subtotal = round(self.cart.calculate_total(items), 2)
        discount = round(min(discount, subtotal), 2)

        order_row = await self.repository.create(
            {
                "user_id": user_id,
                "total_amount": subtotal,
                "discount_amount": discount,
                "final_amount": round(subtotal - discount, 2),
                "payment_method": method.value,
                "status": "completed",
            }
        )
        item_rows = await self.repository.add_items(
            [
                {
                    "order_id": order_row["id"],
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "unit_price": item.price,
                    "total_price": round(item.total_price, 2),
                }
                for item in items
            ]
        )
        await self.cart.clear_cart(user_id)

        logger.info(
            f"Order {order_row['id']} placed by {user_id}: "
            f"{len(item_rows)} lines, charged {order_row['final_amount']:.2f}"
        )
        return self.factory.create_order(order_row, item_rows)

    async def get_order_history(self, user_id: str) -> list[Order]:
        """A user's orders, newest first, each with its items."""
        orders = await self.repository.find_by_user_id(user_id)
        if not orders:
            return []

        item_rows = await self.repository.find_items_by_order_ids([o["id"] for o in orders])
        items_by_order: dict[str, list[dict]] = {}
        for row in item_rows:
            items_by_order.setdefault(row["order_id"], []).append(row)

        return [
            self.factory.create_order(order, items_by_order.get(order["id"], []))
            for order in orders
        ]
