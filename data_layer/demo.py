"""
Demonstration scenarios for the reactive data layer.

Each scenario builds a fresh in-memory store and data layer, attaches a couple
of observers standing in for UI components, and prints what they receive.
"""

import asyncio
import logging

from commerce.config import configure_logging, get_settings
from commerce.errors import StateTransitionError
from commerce.remote_store import InMemoryStore
from data_layer.observer import CallbackObserver
from data_layer.services import Services, build_services

logger = logging.getLogger("demo")

DEMO_USER = "user-demo"


def _fresh_services() -> Services:
    settings = get_settings()
    store = InMemoryStore(data_dir=settings.data_dir, latency=settings.store_latency)
    return build_services(store)


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70 + "\n")


async def cart_sync_demo() -> None:
    """
    Two independent views (a header badge and the cart page) stay in sync
    while the cart is mutated.
    """
    _banner("DEMO: Cart snapshots fan out to every subscriber")
    services = _fresh_services()

    def badge(items):
        print(f"  [badge] {sum(i.quantity for i in items)} units")

    def cart_page(items):
        lines = ", ".join(f"{i.name} x{i.quantity}" for i in items) or "(empty)"
        print(f"  [page]  {lines}")

    with services.cart_subject.subscribed(CallbackObserver(badge)), \
            services.cart_subject.subscribed(CallbackObserver(cart_page)):
        print("ACTION: add coffee twice (upsert, not a second row)")
        await services.cart.add_to_cart(DEMO_USER, "prod-001")
        items = await services.cart.add_to_cart(DEMO_USER, "prod-001")

        print("ACTION: add 3 milk, then set milk to 1")
        await services.cart.add_to_cart(DEMO_USER, "prod-003", 3)
        items = await services.cart.update_quantity(DEMO_USER, "prod-003", 1)
        print(f"  total: {services.cart.calculate_total(items):.2f}")

        print("ACTION: remove coffee, then clear")
        await services.cart.remove_from_cart(DEMO_USER, "prod-001")
        await services.cart.clear_cart(DEMO_USER)


async def shopping_list_demo() -> None:
    """A list is created, filled by scanning, and walked through its lifecycle."""
    _banner("DEMO: Shopping list events and the status state machine")
    services = _fresh_services()

    def list_view(payload):
        print(f"  [lists] {payload!r}"[:120])

    with services.list_subject.subscribed(CallbackObserver(list_view)):
        market = await services.shopping_lists.create_list(DEMO_USER, "Market")
        await services.scanner.handle_scan(market.id, "7891000300305")
        await services.scanner.handle_scan(market.id, "0000000000000")
        await services.shopping_lists.add_item_to_list(market.id, "prod-005", 2)

        items = await services.shopping_lists.get_list_items(market.id)
        total = services.shopping_lists.calculate_total(items)
        print(f"  {len(items)} items, estimated total {total:.2f}")

        await services.shopping_lists.advance_list(market.id)
        await services.shopping_lists.advance_list(market.id)
        try:
            await services.shopping_lists.update_list_status(market.id, "ongoing")
        except StateTransitionError as e:
            print(f"  rejected: {e}")


async def checkout_demo() -> None:
    """Cart -> order -> order history."""
    _banner("DEMO: Checkout and order history")
    services = _fresh_services()

    await services.cart.add_to_cart(DEMO_USER, "prod-007", 2)
    await services.cart.add_to_cart(DEMO_USER, "prod-008")
    order = await services.orders.checkout(DEMO_USER, "pix", discount=5.0)
    print(f"  order {order.id[:8]}: charged {order.final_amount:.2f} ({order.item_count()} units)")

    history = await services.orders.get_order_history(DEMO_USER)
    for past in history:
        names = ", ".join(item.product_name or item.product_id for item in past.items)
        print(f"  history: {past.created_at:%Y-%m-%d %H:%M} {past.final_amount:.2f} - {names}")


SCENARIOS = {
    "cart": cart_sync_demo,
    "lists": shopping_list_demo,
    "checkout": checkout_demo,
}


def run_demo(scenario: str) -> None:
    """Run one scenario by name, or all of them with 'all'."""
    configure_logging()
    names = list(SCENARIOS) if scenario == "all" else [scenario]
    for name in names:
        asyncio.run(SCENARIOS[name]())
