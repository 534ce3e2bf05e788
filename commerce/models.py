"""
Domain models for the storefront data layer.

These are the objects the UI works with. They are rebuilt from raw store
records on every read (see data_layer/factory.py) and thrown away once a newer
snapshot has been broadcast, so nothing here caches state.

Design decisions:
- Using Pydantic for validation, with validate_assignment so that mutating a
  commercial attribute (price, stock, quantity) is checked too
- A CartItem *holds* a Product rather than extending it
- Shopping list status is a small forward-only state machine
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


# =============================================================================
# Enums
# =============================================================================

class ShoppingListStatus(str, Enum):
    """
    Lifecycle of a shopping list.

    previous -> ongoing -> completed. Completed is terminal and there is no
    way back.
    """
    PREVIOUS = "previous"
    ONGOING = "ongoing"
    COMPLETED = "completed"

    @property
    def successor(self) -> Optional["ShoppingListStatus"]:
        """The only status this one may move to, or None when terminal."""
        return _STATUS_SUCCESSORS.get(self)

    def can_transition_to(self, target: "ShoppingListStatus") -> bool:
        return self.successor is not None and self.successor == target


_STATUS_SUCCESSORS = {
    ShoppingListStatus.PREVIOUS: ShoppingListStatus.ONGOING,
    ShoppingListStatus.ONGOING: ShoppingListStatus.COMPLETED,
}


class ListAction(str, Enum):
    """Tags carried by shopping list change events."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ITEM_ADDED = "item_added"
    ITEM_UPDATED = "item_updated"
    ITEM_REMOVED = "item_removed"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PIX = "pix"
    DIGITAL_WALLET = "digital_wallet"


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# =============================================================================
# Catalog and Cart
# =============================================================================

class Product(BaseModel):
    """
    Product entity from the catalog.

    Products are created by the store (seed data or an admin path); the data
    layer only ever reads them. Identity is fixed, commercial attributes can
    change between snapshots.
    """
    id: str = Field(..., description="Unique product identifier")
    name: str = Field(..., description="Product display name")
    category: str = Field(..., description="Product category")
    price: float = Field(..., ge=0, description="Current unit price")
    description: Optional[str] = Field(default=None)
    barcode: Optional[str] = Field(default=None, description="EAN/QR payload used by the scanner")
    image_url: Optional[str] = Field(default=None)
    stock: int = Field(default=0, ge=0, description="Units available")
    created_at: Optional[datetime] = Field(default=None)

    model_config = ConfigDict(validate_assignment=True)

    def is_in_stock(self) -> bool:
        return self.stock > 0


class CartItem(BaseModel):
    """
    A product in a user's cart.

    The store keeps one row per (user, product) pair; `cart_id` is that row's
    identity. Quantity is always positive: removing an item deletes the row.
    """
    product: Product = Field(..., description="The product this row points to")
    quantity: int = Field(..., ge=1, description="Units in cart")
    cart_id: Optional[str] = Field(default=None, description="Identity of the cart row")
    added_at: Optional[datetime] = Field(default=None)

    model_config = ConfigDict(validate_assignment=True)

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def name(self) -> str:
        return self.product.name

    @property
    def price(self) -> float:
        return self.product.price

    @property
    def total_price(self) -> float:
        """Line total: unit price times quantity."""
        return self.product.price * self.quantity


# =============================================================================
# Shopping Lists
# =============================================================================

class ShoppingList(BaseModel):
    """A named list owned by exactly one user."""
    id: str = Field(..., description="Unique list identifier")
    user_id: str = Field(..., description="List owner")
    name: str = Field(..., min_length=1)
    status: ShoppingListStatus = Field(default=ShoppingListStatus.PREVIOUS)
    created_at: Optional[datetime] = Field(default=None)
    updated_at: Optional[datetime] = Field(default=None)


class ShoppingListItem(BaseModel):
    """
    One product on a shopping list.

    `product` is the denormalized product record embedded by the store so the
    list can be displayed (and totalled) without another lookup.
    """
    id: str = Field(..., description="Unique item identifier")
    list_id: str = Field(..., description="Owning list")
    product_id: str = Field(..., description="Referenced product")
    quantity: int = Field(..., ge=1)
    created_at: Optional[datetime] = Field(default=None)
    product: Optional[Product] = Field(default=None)


class ListEvent(BaseModel):
    """
    Change notification broadcast after a shopping list mutation.

    Unlike the cart, list mutations do not reload: subscribers get a tag
    plus the context of the change and re-fetch what they display.
    """
    action: ListAction
    list_id: Optional[str] = None
    shopping_list: Optional[ShoppingList] = None
    status: Optional[ShoppingListStatus] = None
    product_id: Optional[str] = None
    item_id: Optional[str] = None
    quantity: Optional[int] = None


# =============================================================================
# Orders
# =============================================================================

class OrderItem(BaseModel):
    """A purchased line, priced at checkout time."""
    id: str
    order_id: str
    product_id: str
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)
    total_price: float = Field(..., ge=0)
    product_name: Optional[str] = None
    product_category: Optional[str] = None


class Order(BaseModel):
    """A completed checkout of a user's cart."""
    id: str = Field(..., description="Unique order identifier")
    user_id: str = Field(..., description="Buyer")
    total_amount: float = Field(..., ge=0, description="Cart subtotal")
    discount_amount: float = Field(default=0.0, ge=0)
    final_amount: float = Field(..., ge=0, description="Amount charged")
    payment_method: PaymentMethod
    status: OrderStatus = Field(default=OrderStatus.COMPLETED)
    created_at: Optional[datetime] = Field(default=None)
    items: list[OrderItem] = Field(default_factory=list)

    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
