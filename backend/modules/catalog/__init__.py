# backend/modules/catalog/__init__.py

"""
Restaurant catalog: categories, products and product variants.
"""

from .routes.catalog_routes import router as catalog_router
from .services.catalog_service import CatalogService

__all__ = ["catalog_router", "CatalogService"]
