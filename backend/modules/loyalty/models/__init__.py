# backend/modules/loyalty/models/__init__.py

from .loyalty_models import LoyaltyTransaction, TransactionType

__all__ = [
    "LoyaltyTransaction",
    "TransactionType",
]
