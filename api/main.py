"""
FastAPI application exposing the storefront data layer.

This is the UI boundary: it owns the one Services container, calls the
controllers, and is the only place where data layer errors become
user-visible responses.

Run with:
    uv run uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from commerce.config import Settings, configure_logging, get_settings
from commerce.errors import (
    DataLayerError,
    RecordNotFoundError,
    StateTransitionError,
    StorageError,
    ValidationError,
)
from commerce.models import CartItem, Order, Product, ShoppingList, ShoppingListItem
from commerce.remote_store import InMemoryStore, RemoteStore
from data_layer.services import Services, build_services

logger = logging.getLogger("api")


# =============================================================================
# Request / Response models
# =============================================================================

class CartLine(BaseModel):
    product_id: str
    quantity: int = 1


class QuantityUpdate(BaseModel):
    quantity: int


class NewList(BaseModel):
    name: str


class StatusUpdate(BaseModel):
    status: str


class ScanRequest(BaseModel):
    code: str
    quantity: int = 1


class CheckoutRequest(BaseModel):
    payment_method: str
    discount: float = 0.0


class CartResponse(BaseModel):
    items: list[CartItem]
    total: float


class ListItemsResponse(BaseModel):
    items: list[ShoppingListItem]
    total: float


class ScanResponse(BaseModel):
    added: bool
    product: Optional[Product] = None


# =============================================================================
# Application factory
# =============================================================================

# Most specific first: RecordNotFoundError is a StorageError
ERROR_STATUS = (
    (ValidationError, 400),
    (RecordNotFoundError, 404),
    (StateTransitionError, 409),
    (StorageError, 502),
)


def create_app(store: Optional[RemoteStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        store: Store to run against; defaults to an InMemoryStore seeded from
               settings.data_dir
        settings: Settings override (defaults to get_settings())
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the data layer once at startup."""
        configure_logging(settings)
        backing_store = store or InMemoryStore(
            data_dir=settings.data_dir, latency=settings.store_latency
        )
        app.state.services = build_services(backing_store)
        logger.info("Storefront API started")
        yield
        app.state.services.cart_subject.clear()
        app.state.services.list_subject.clear()
        logger.info("Shutting down")

    app = FastAPI(
        title=settings.api_title,
        description="Products, cart, shopping lists and orders over the reactive data layer.",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.exception_handler(DataLayerError)
    async def data_layer_error_handler(request: Request, exc: DataLayerError):
        status_code = next(
            (code for error_type, code in ERROR_STATUS if isinstance(exc, error_type)),
            500,
        )
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    _register_routes(app)
    return app


def get_services(request: Request) -> Services:
    return request.app.state.services


def _register_routes(app: FastAPI) -> None:

    @app.get("/health", tags=["Health"])
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "storefront-data-layer"}

    # =========================================================================
    # Products
    # =========================================================================

    @app.get("/products", response_model=list[Product], tags=["Products"])
    async def list_products(
        q: Optional[str] = None,
        category: Optional[str] = None,
        services: Services = Depends(get_services),
    ):
        """All products, or those matching a search term or category."""
        if q:
            return await services.products.search_products(q)
        if category:
            return await services.products.get_products_by_category(category)
        return await services.products.get_all_products()

    @app.get("/products/categories", response_model=list[str], tags=["Products"])
    async def list_categories(services: Services = Depends(get_services)):
        return await services.products.get_categories()

    @app.get("/products/barcode/{code}", response_model=Product, tags=["Products"])
    async def product_by_barcode(code: str, services: Services = Depends(get_services)):
        product = await services.products.get_product_by_barcode(code)
        if product is None:
            raise RecordNotFoundError(f"No product with barcode {code}")
        return product

    @app.get("/products/{product_id}", response_model=Product, tags=["Products"])
    async def product_by_id(product_id: str, services: Services = Depends(get_services)):
        product = await services.products.get_product_by_id(product_id)
        if product is None:
            raise RecordNotFoundError(f"Product not found: {product_id}")
        return product

    # =========================================================================
    # Cart
    # =========================================================================

    def _cart_response(services: Services, items: list[CartItem]) -> CartResponse:
        return CartResponse(items=items, total=services.cart.calculate_total(items))

    @app.get("/users/{user_id}/cart", response_model=CartResponse, tags=["Cart"])
    async def get_cart(user_id: str, services: Services = Depends(get_services)):
        items = await services.cart.get_cart_items(user_id)
        return _cart_response(services, items)

    @app.post("/users/{user_id}/cart", response_model=CartResponse, tags=["Cart"])
    async def add_to_cart(user_id: str, line: CartLine, services: Services = Depends(get_services)):
        items = await services.cart.add_to_cart(user_id, line.product_id, line.quantity)
        return _cart_response(services, items)

    @app.patch("/users/{user_id}/cart/{product_id}", response_model=CartResponse, tags=["Cart"])
    async def update_cart_quantity(
        user_id: str,
        product_id: str,
        update: QuantityUpdate,
        services: Services = Depends(get_services),
    ):
        items = await services.cart.update_quantity(user_id, product_id, update.quantity)
        return _cart_response(services, items)

    @app.delete("/users/{user_id}/cart/{product_id}", response_model=CartResponse, tags=["Cart"])
    async def remove_from_cart(user_id: str, product_id: str, services: Services = Depends(get_services)):
        items = await services.cart.remove_from_cart(user_id, product_id)
        return _cart_response(services, items)

    @app.delete("/users/{user_id}/cart", response_model=CartResponse, tags=["Cart"])
    async def clear_cart(user_id: str, services: Services = Depends(get_services)):
        items = await services.cart.clear_cart(user_id)
        return _cart_response(services, items)

    # =========================================================================
    # Shopping lists
    # =========================================================================

    @app.get("/users/{user_id}/lists", response_model=list[ShoppingList], tags=["Shopping Lists"])
    async def get_lists(
        user_id: str,
        status: Optional[str] = None,
        services: Services = Depends(get_services),
    ):
        return await services.shopping_lists.get_lists(user_id, status)

    @app.post(
        "/users/{user_id}/lists",
        response_model=ShoppingList,
        status_code=201,
        tags=["Shopping Lists"],
    )
    async def create_list(user_id: str, new_list: NewList, services: Services = Depends(get_services)):
        return await services.shopping_lists.create_list(user_id, new_list.name)

    @app.get("/lists/{list_id}", response_model=ShoppingList, tags=["Shopping Lists"])
    async def get_list(list_id: str, services: Services = Depends(get_services)):
        shopping_list = await services.shopping_lists.get_list(list_id)
        if shopping_list is None:
            raise RecordNotFoundError(f"Shopping list not found: {list_id}")
        return shopping_list

    @app.patch("/lists/{list_id}/status", response_model=ShoppingList, tags=["Shopping Lists"])
    async def update_list_status(list_id: str, update: StatusUpdate, services: Services = Depends(get_services)):
        return await services.shopping_lists.update_list_status(list_id, update.status)

    @app.delete("/lists/{list_id}", status_code=204, tags=["Shopping Lists"])
    async def delete_list(list_id: str, services: Services = Depends(get_services)):
        await services.shopping_lists.delete_list(list_id)

    @app.get("/lists/{list_id}/items", response_model=ListItemsResponse, tags=["Shopping Lists"])
    async def get_list_items(list_id: str, services: Services = Depends(get_services)):
        items = await services.shopping_lists.get_list_items(list_id)
        return ListItemsResponse(items=items, total=services.shopping_lists.calculate_total(items))

    @app.post("/lists/{list_id}/items", status_code=204, tags=["Shopping Lists"])
    async def add_list_item(list_id: str, line: CartLine, services: Services = Depends(get_services)):
        await services.shopping_lists.add_item_to_list(list_id, line.product_id, line.quantity)

    @app.post("/lists/{list_id}/scan", response_model=ScanResponse, tags=["Shopping Lists"])
    async def scan_into_list(list_id: str, scan: ScanRequest, services: Services = Depends(get_services)):
        """Feed one decoded barcode from the scanner widget."""
        product = await services.scanner.handle_scan(list_id, scan.code, scan.quantity)
        return ScanResponse(added=product is not None, product=product)

    @app.patch("/list-items/{item_id}", status_code=204, tags=["Shopping Lists"])
    async def update_list_item(item_id: str, update: QuantityUpdate, services: Services = Depends(get_services)):
        await services.shopping_lists.update_item_quantity(item_id, update.quantity)

    @app.delete("/list-items/{item_id}", status_code=204, tags=["Shopping Lists"])
    async def remove_list_item(item_id: str, services: Services = Depends(get_services)):
        await services.shopping_lists.remove_item_from_list(item_id)

    # =========================================================================
    # Orders
    # =========================================================================

    @app.post("/users/{user_id}/checkout", response_model=Order, status_code=201, tags=["Orders"])
    async def checkout(user_id: str, body: CheckoutRequest, services: Services = Depends(get_services)):
        return await services.orders.checkout(user_id, body.payment_method, body.discount)

    @app.get("/users/{user_id}/orders", response_model=list[Order], tags=["Orders"])
    async def order_history(user_id: str, services: Services = Depends(get_services)):
        return await services.orders.get_order_history(user_id)


app = create_app()
