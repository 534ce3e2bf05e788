"""
Service wiring.

`build_services` is called once at application start. It creates the two
subjects and one controller per entity, and returns them in a `Services`
container that is passed to whoever needs them. There is no module-level
instance: the API keeps its container on `app.state`, tests build their own.
"""

import logging
from dataclasses import dataclass

from commerce.models import CartItem
from commerce.remote_store import RemoteStore
from data_layer.controllers import (
    CartController,
    ListPayload,
    OrderController,
    ProductController,
    ShoppingListController,
)
from data_layer.observer import Subject
from data_layer.repositories import (
    CartRepository,
    OrderRepository,
    ProductRepository,
    ShoppingListRepository,
)
from data_layer.scanner import BarcodeScanHandler

logger = logging.getLogger("services")


@dataclass
class Services:
    """The long-lived data layer objects shared by every consumer."""
    store: RemoteStore
    cart_subject: Subject[list[CartItem]]
    list_subject: Subject[ListPayload]
    products: ProductController
    cart: CartController
    shopping_lists: ShoppingListController
    orders: OrderController
    scanner: BarcodeScanHandler


def build_services(store: RemoteStore) -> Services:
    """Create every subject, repository and controller on top of `store`."""
    cart_subject: Subject[list[CartItem]] = Subject("cart")
    list_subject: Subject[ListPayload] = Subject("shopping_lists")

    products = ProductController(ProductRepository(store))
    cart = CartController(CartRepository(store), cart_subject)
    shopping_lists = ShoppingListController(ShoppingListRepository(store), list_subject)
    orders = OrderController(OrderRepository(store), cart)

    logger.info(f"Data layer ready on {type(store).__name__}")
    return Services(
        store=store,
        cart_subject=cart_subject,
        list_subject=list_subject,
        products=products,
        cart=cart,
        shopping_lists=shopping_lists,
        orders=orders,
        scanner=BarcodeScanHandler(products, shopping_lists),
    )
