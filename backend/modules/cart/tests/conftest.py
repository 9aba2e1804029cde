# backend/modules/cart/tests/conftest.py

import pytest
from decimal import Decimal

from modules.catalog.schemas.catalog_schemas import ProductWithVariants
from modules.cart.services.cart_service import CartService
from modules.cart.storage.cart_storage import InMemoryCartStorage


@pytest.fixture
def sashimi() -> ProductWithVariants:
    """Sashimi Saumon with a standard and a large variant"""
    return ProductWithVariants(
        id=1,
        category_id=1,
        name="Sashimi Saumon",
        description="6 tranches de saumon frais",
        base_price=Decimal("12.90"),
        is_popular=True,
        allergens=["poisson"],
        preparation_time=10,
        variants=[
            {"id": 1, "product_id": 1, "name": "Standard", "price_modifier": "0.00", "is_default": True},
            {"id": 2, "product_id": 1, "name": "Large", "price_modifier": "12.00"},
        ],
    )


@pytest.fixture
def maki() -> ProductWithVariants:
    return ProductWithVariants(
        id=3,
        category_id=3,
        name="Maki Saumon",
        base_price=Decimal("7.90"),
    )


@pytest.fixture
def cart_store():
    """Private dict backing one in-memory cart"""
    return {}


@pytest.fixture
def storage(cart_store):
    return InMemoryCartStorage("osushi_cart:test-session", store=cart_store)


@pytest.fixture
def cart_service(storage):
    return CartService(storage)
