# backend/modules/customers/models/__init__.py

from .customer_models import Customer, CustomerTier

__all__ = ["Customer", "CustomerTier"]
