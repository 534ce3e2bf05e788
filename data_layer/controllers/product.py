"""
Product controller: read-only facade over the catalog.

The catalog has no subscribers, so nothing here notifies.
"""

import logging
from typing import Optional

from commerce.models import Product
from data_layer.factory import ModelFactory
from data_layer.repositories.product import ProductRepository

logger = logging.getLogger("product_controller")


class ProductController:
    """Catalog use cases for the product pages and the scanner."""

    def __init__(self, repository: ProductRepository, factory: type[ModelFactory] = ModelFactory):
        self.repository = repository
        self.factory = factory

    async def get_all_products(self) -> list[Product]:
        data = await self.repository.find_all()
        return self.factory.create_products(data)

    async def search_products(self, query: str) -> list[Product]:
        """Products matching `query`; a blank query returns the whole catalog."""
        term = query.strip()
        if not term:
            return await self.get_all_products()
        data = await self.repository.search(term)
        logger.debug(f"Search '{term}' matched {len(data)} products")
        return self.factory.create_products(data)

    async def get_products_by_category(self, category: str) -> list[Product]:
        data = await self.repository.find_by_category(category)
        return self.factory.create_products(data)

    async def get_categories(self) -> list[str]:
        return await self.repository.find_all_categories()

    async def get_product_by_id(self, product_id: str) -> Optional[Product]:
        data = await self.repository.find_by_id(product_id)
        if data is None:
            return None
        return self.factory.create_product(data)

    async def get_product_by_barcode(self, barcode: str) -> Optional[Product]:
        data = await self.repository.find_by_barcode(barcode)
        if data is None:
            return None
        return self.factory.create_product(data)
