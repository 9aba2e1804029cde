# backend/tests/factories/__init__.py

"""
Shared test factories for the ordering backend.
"""

from .base import BaseFactory
from .catalog import CategoryFactory, ProductFactory, ProductVariantFactory
from .customer import CustomerFactory
from .order import OrderFactory, OrderItemFactory

__all__ = [
    'BaseFactory',
    'CategoryFactory',
    'ProductFactory',
    'ProductVariantFactory',
    'CustomerFactory',
    'OrderFactory',
    'OrderItemFactory',
]
