# backend/modules/customers/__init__.py

"""
Customer accounts carrying the cached loyalty balance and tier.
"""

from .routers.customer_router import router as customer_router
from .services.customer_service import CustomerService

__all__ = ["customer_router", "CustomerService"]
