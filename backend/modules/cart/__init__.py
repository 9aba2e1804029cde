# backend/modules/cart/__init__.py

"""
Shopping cart: pricing, the per-session cart store and its storage ports.
"""

from .routes.cart_routes import router as cart_router
from .services.cart_service import CartService

__all__ = ["cart_router", "CartService"]
