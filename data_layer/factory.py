"""
Model factory: raw store records -> validated domain objects.

This is the only place that knows what store rows look like. Controllers
hand it whatever a repository returned and get domain models back.

Every method is a pure function: no I/O, no side effects, same input gives
the same output. Bad input raises ValidationError.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from commerce.errors import ValidationError
from commerce.models import (
    CartItem,
    Order,
    OrderItem,
    Product,
    ShoppingList,
    ShoppingListItem,
)

PRODUCT_FIELDS = (
    "id",
    "name",
    "category",
    "price",
    "description",
    "barcode",
    "image_url",
    "stock",
    "created_at",
)


def _require_mapping(raw: Any, what: str) -> Mapping:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Cannot build {what} from {type(raw).__name__}")
    return raw


def _require_sequence(raw: Any, what: str) -> Sequence:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise ValidationError(
            f"Expected a sequence of {what} records, got {type(raw).__name__}"
        )
    return raw


def _build(model: type, what: str, **values):
    try:
        return model(**values)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {what}: {e}") from e


class ModelFactory:
    """Stateless constructors for every domain object the data layer returns."""

    # =========================================================================
    # Products
    # =========================================================================

    @staticmethod
    def create_product(raw: Mapping) -> Product:
        raw = _require_mapping(raw, "product")
        values = {name: raw.get(name) for name in PRODUCT_FIELDS}
        # Older rows may carry a null stock
        if values["stock"] is None:
            values["stock"] = 0
        return _build(Product, "product", **values)

    @classmethod
    def create_products(cls, raw_list: Sequence) -> list[Product]:
        return [cls.create_product(raw) for raw in _require_sequence(raw_list, "product")]

    # =========================================================================
    # Cart
    # =========================================================================

    @classmethod
    def create_cart_item(cls, raw: Mapping) -> CartItem:
        """
        Build a CartItem from a cart row with its embedded product.

        The usual shape is `{"id", "quantity", "added_at", "products": {...}}`
        where `id` is the cart row. A flat product record carrying `quantity`
        (and optionally `cart_id`) is accepted as well.
        """
        raw = _require_mapping(raw, "cart item")
        nested = raw.get("products") or raw.get("product")
        if nested is not None:
            product = cls.create_product(nested)
            cart_id = raw.get("id")
        else:
            product = cls.create_product(raw)
            cart_id = raw.get("cart_id")

        return _build(
            CartItem,
            "cart item",
            product=product,
            quantity=raw.get("quantity"),
            cart_id=cart_id,
            added_at=raw.get("added_at"),
        )

    @classmethod
    def create_cart_items(cls, raw_list: Sequence) -> list[CartItem]:
        return [cls.create_cart_item(raw) for raw in _require_sequence(raw_list, "cart")]

    # =========================================================================
    # Shopping lists
    # =========================================================================

    @staticmethod
    def create_shopping_list(raw: Mapping) -> ShoppingList:
        raw = _require_mapping(raw, "shopping list")
        return _build(
            ShoppingList,
            "shopping list",
            id=raw.get("id"),
            user_id=raw.get("user_id"),
            name=raw.get("name"),
            status=raw.get("status") or "previous",
            created_at=raw.get("created_at"),
            updated_at=raw.get("updated_at"),
        )

    @classmethod
    def create_shopping_lists(cls, raw_list: Sequence) -> list[ShoppingList]:
        return [
            cls.create_shopping_list(raw)
            for raw in _require_sequence(raw_list, "shopping list")
        ]

    @classmethod
    def create_list_item(cls, raw: Mapping) -> ShoppingListItem:
        raw = _require_mapping(raw, "shopping list item")
        nested = raw.get("products") or raw.get("product")
        product: Optional[Product] = cls.create_product(nested) if nested else None
        return _build(
            ShoppingListItem,
            "shopping list item",
            id=raw.get("id"),
            list_id=raw.get("list_id"),
            product_id=raw.get("product_id"),
            quantity=raw.get("quantity"),
            created_at=raw.get("created_at"),
            product=product,
        )

    @classmethod
    def create_list_items(cls, raw_list: Sequence) -> list[ShoppingListItem]:
        return [
            cls.create_list_item(raw)
            for raw in _require_sequence(raw_list, "shopping list item")
        ]

    # =========================================================================
    # Orders
    # =========================================================================

    @staticmethod
    def create_order_item(raw: Mapping) -> OrderItem:
        raw = _require_mapping(raw, "order item")
        product = raw.get("products") or {}
        return _build(
            OrderItem,
            "order item",
            id=raw.get("id"),
            order_id=raw.get("order_id"),
            product_id=raw.get("product_id"),
            quantity=raw.get("quantity"),
            unit_price=raw.get("unit_price"),
            total_price=raw.get("total_price"),
            product_name=product.get("name"),
            product_category=product.get("category"),
        )

    @classmethod
    def create_order(cls, raw: Mapping, raw_items: Sequence = ()) -> Order:
        raw = _require_mapping(raw, "order")
        items = [
            cls.create_order_item(item)
            for item in _require_sequence(raw_items, "order item")
        ]
        return _build(
            Order,
            "order",
            id=raw.get("id"),
            user_id=raw.get("user_id"),
            total_amount=raw.get("total_amount"),
            discount_amount=raw.get("discount_amount") or 0.0,
            final_amount=raw.get("final_amount"),
            payment_method=raw.get("payment_method"),
            status=raw.get("status") or "completed",
            created_at=raw.get("created_at"),
            items=items,
        )
