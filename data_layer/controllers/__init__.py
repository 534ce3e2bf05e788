"""
Controllers: one per entity.

Controllers compose a repository, the model factory and (for cart and lists)
a Subject into the use cases the UI calls. They enforce the business rules the
store does not, and they never catch errors.
"""

from data_layer.controllers.product import ProductController
from data_layer.controllers.cart import CartController
from data_layer.controllers.shopping_list import ListPayload, ShoppingListController
from data_layer.controllers.order import OrderController

__all__ = [
    "ProductController",
    "CartController",
    "ShoppingListController",
    "ListPayload",
    "OrderController",
]
