"""
Shared domain for the storefront data layer.

This package contains code used by every layer above it:
- Domain models (Product, CartItem, ShoppingList, Order, etc.)
- The remote store contract and an in-memory store
- The error taxonomy
- Settings and logging setup
"""

from commerce.models import (
    Product,
    CartItem,
    ShoppingList,
    ShoppingListItem,
    ShoppingListStatus,
    ListAction,
    ListEvent,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
)
from commerce.errors import (
    DataLayerError,
    StorageError,
    RecordNotFoundError,
    ValidationError,
    StateTransitionError,
)
from commerce.remote_store import InMemoryStore, Query, RemoteStore, RemoteStoreError

__all__ = [
    "Product",
    "CartItem",
    "ShoppingList",
    "ShoppingListItem",
    "ShoppingListStatus",
    "ListAction",
    "ListEvent",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "DataLayerError",
    "StorageError",
    "RecordNotFoundError",
    "ValidationError",
    "StateTransitionError",
    "InMemoryStore",
    "Query",
    "RemoteStore",
    "RemoteStoreError",
]
