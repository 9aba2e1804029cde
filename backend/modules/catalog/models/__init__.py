# backend/modules/catalog/models/__init__.py

from .catalog_models import Category, Product, ProductVariant

__all__ = ["Category", "Product", "ProductVariant"]
