"""
HTTP API for the storefront data layer.

This package provides a single FastAPI application that exposes:
- Catalog browsing, search and barcode lookup
- Cart mutations (each returns the reloaded cart and its total)
- Shopping lists, their items and the scanner entry point
- Checkout and order history
"""

from api.main import app, create_app

__all__ = ["app", "create_app"]
