"""
Barcode scanner integration.

The scanning widget is a black box that hands over one decoded string. This
handler looks the product up by exact barcode and, on a hit, puts it on the
list the user is looking at.
"""

import logging
from typing import Optional

from commerce.models import Product
from data_layer.controllers.product import ProductController
from data_layer.controllers.shopping_list import ShoppingListController

logger = logging.getLogger("scanner")


class BarcodeScanHandler:
    """Adds scanned products to a shopping list."""

    def __init__(self, products: ProductController, shopping_lists: ShoppingListController):
        self.products = products
        self.shopping_lists = shopping_lists

    async def handle_scan(self, list_id: str, code: str, quantity: int = 1) -> Optional[Product]:
        """
        Handle one decoded scan.

        Returns:
            The product that was added, or None when the code is blank or
            matches no product (nothing is added in that case)
        """
        code = code.strip()
        if not code:
            logger.warning("Ignoring empty scan")
            return None

        product = await self.products.get_product_by_barcode(code)
        if product is None:
            logger.warning(f"No product with barcode {code}")
            return None

        await self.shopping_lists.add_item_to_list(list_id, product.id, quantity)
        logger.info(f"Scanned {code} -> {product.name} added to list {list_id}")
        return product
