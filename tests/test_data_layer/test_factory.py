"""
Tests for ModelFactory.

These tests verify that raw store records become validated domain objects
and that malformed input is rejected with ValidationError.
"""

import pytest
from datetime import datetime

from commerce.errors import ValidationError
from commerce.models import Product, ShoppingListStatus
from data_layer.factory import ModelFactory


@pytest.fixture
def raw_product() -> dict:
    return {
        "id": "prod-100",
        "name": "Espresso Cups",
        "category": "Kitchen",
        "price": "19.90",
        "description": None,
        "barcode": "123",
        "image_url": None,
        "stock": None,
        "created_at": "2024-05-01T12:00:00+00:00",
    }


class TestProducts:
    """Tests for product construction."""

    def test_create_product(self, raw_product):
        """Test building a product from a store row."""
        product = ModelFactory.create_product(raw_product)

        assert isinstance(product, Product)
        assert product.id == "prod-100"
        assert product.price == 19.90  # numeric strings are normalized
        assert product.stock == 0  # null stock becomes 0
        assert isinstance(product.created_at, datetime)

    def test_create_product_ignores_unknown_columns(self, raw_product):
        """Test that extra columns are dropped."""
        raw_product["internal_notes"] = "do not ship"
        product = ModelFactory.create_product(raw_product)
        assert not hasattr(product, "internal_notes")

    def test_negative_price_rejected(self, raw_product):
        """Test that a negative price raises ValidationError."""
        raw_product["price"] = -1
        with pytest.raises(ValidationError):
            ModelFactory.create_product(raw_product)

    def test_missing_name_rejected(self, raw_product):
        """Test that a row without a name raises ValidationError."""
        del raw_product["name"]
        with pytest.raises(ValidationError):
            ModelFactory.create_product(raw_product)

    def test_non_mapping_rejected(self):
        """Test that a non-mapping record raises ValidationError."""
        with pytest.raises(ValidationError):
            ModelFactory.create_product(["prod-100"])

    def test_create_products(self, raw_product):
        """Test building a list of products."""
        second = dict(raw_product, id="prod-101")
        products = ModelFactory.create_products([raw_product, second])
        assert [p.id for p in products] == ["prod-100", "prod-101"]

    def test_create_products_empty(self):
        """Test that an empty list gives no products."""
        assert ModelFactory.create_products([]) == []

    @pytest.mark.parametrize("not_a_sequence", [None, {"id": "x"}, "prod-100", 42])
    def test_create_products_requires_sequence(self, not_a_sequence):
        """Test that a non-sequence input raises ValidationError."""
        with pytest.raises(ValidationError):
            ModelFactory.create_products(not_a_sequence)

    def test_is_deterministic(self, raw_product):
        """Test that the same row always builds the same product."""
        assert ModelFactory.create_product(raw_product) == ModelFactory.create_product(raw_product)


class TestCartItems:
    """Tests for cart item construction."""

    def test_create_cart_item_from_nested_row(self, raw_product):
        """Test building a cart item from a row with an embedded product."""
        raw = {"id": "cart-1", "quantity": 3, "added_at": None, "products": raw_product}

        item = ModelFactory.create_cart_item(raw)

        assert item.cart_id == "cart-1"
        assert item.quantity == 3
        assert item.product.id == "prod-100"
        assert item.product_id == "prod-100"
        assert item.price == 19.90
        assert item.total_price == pytest.approx(59.70)

    def test_create_cart_item_from_flat_record(self, raw_product):
        """Test building a cart item from a flat product record."""
        raw = dict(raw_product, quantity=2, cart_id="cart-9")

        item = ModelFactory.create_cart_item(raw)

        assert item.product.id == "prod-100"
        assert item.cart_id == "cart-9"
        assert item.quantity == 2

    def test_zero_quantity_rejected(self, raw_product):
        """Test that a zero quantity raises ValidationError."""
        with pytest.raises(ValidationError):
            ModelFactory.create_cart_item({"id": "c", "quantity": 0, "products": raw_product})

    def test_create_cart_items_requires_sequence(self):
        """Test that cart items need a sequence of rows."""
        with pytest.raises(ValidationError):
            ModelFactory.create_cart_items(None)


class TestShoppingLists:
    """Tests for shopping list and item construction."""

    def test_create_shopping_list(self):
        """Test building a shopping list."""
        shopping_list = ModelFactory.create_shopping_list(
            {"id": "l1", "user_id": "u1", "name": "Market", "status": "ongoing"}
        )
        assert shopping_list.status == ShoppingListStatus.ONGOING

    def test_unknown_status_rejected(self):
        """Test that an unknown status raises ValidationError."""
        with pytest.raises(ValidationError):
            ModelFactory.create_shopping_list(
                {"id": "l1", "user_id": "u1", "name": "Market", "status": "archived"}
            )

    def test_create_list_item_with_product(self, raw_product):
        """Test building a list item with its product."""
        item = ModelFactory.create_list_item(
            {
                "id": "i1",
                "list_id": "l1",
                "product_id": "prod-100",
                "quantity": 3,
                "products": raw_product,
            }
        )
        assert item.product is not None
        assert item.product.price == 19.90

    def test_create_list_item_without_product(self):
        """Test that a list item whose product is gone has no product."""
        item = ModelFactory.create_list_item(
            {"id": "i1", "list_id": "l1", "product_id": "gone", "quantity": 1, "products": None}
        )
        assert item.product is None


class TestOrders:
    """Tests for order construction."""

    def test_create_order_with_items(self):
        """Test building an order with its items."""
        order = ModelFactory.create_order(
            {
                "id": "o1",
                "user_id": "u1",
                "total_amount": 30.0,
                "discount_amount": None,
                "final_amount": 30.0,
                "payment_method": "pix",
            },
            [
                {
                    "id": "oi1",
                    "order_id": "o1",
                    "product_id": "p1",
                    "quantity": 2,
                    "unit_price": 15.0,
                    "total_price": 30.0,
                    "products": {"name": "Thing", "category": "Misc"},
                }
            ],
        )

        assert order.discount_amount == 0.0
        assert order.status == "completed"
        assert order.items[0].product_name == "Thing"
        assert order.item_count() == 2

    def test_unknown_payment_method_rejected(self):
        """Test that an unknown payment method raises ValidationError."""
        with pytest.raises(ValidationError):
            ModelFactory.create_order(
                {"id": "o1", "user_id": "u1", "total_amount": 1, "final_amount": 1, "payment_method": "cash"}
            )
