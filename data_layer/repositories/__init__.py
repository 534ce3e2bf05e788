"""
Repositories: one per entity, one store round trip per method.

Each repository returns raw records (or None / an empty list when nothing
matches) and raises StorageError when the store call fails.
"""

from data_layer.repositories.base import Repository
from data_layer.repositories.product import ProductRepository
from data_layer.repositories.cart import CartRepository
from data_layer.repositories.shopping_list import ShoppingListRepository
from data_layer.repositories.order import OrderRepository

__all__ = [
    "Repository",
    "ProductRepository",
    "CartRepository",
    "ShoppingListRepository",
    "OrderRepository",
]
