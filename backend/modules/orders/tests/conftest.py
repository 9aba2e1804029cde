# backend/modules/orders/tests/conftest.py

import pytest
from decimal import Decimal

from modules.cart.services.cart_service import CartService
from modules.cart.storage.cart_storage import InMemoryCartStorage
from modules.catalog.services.catalog_service import CatalogService
from modules.orders.schemas.order_schemas import CustomerInfo
from tests.factories import CustomerFactory, ProductFactory, ProductVariantFactory


@pytest.fixture
def product(db_session):
    product = ProductFactory(name="Sashimi Saumon", base_price=Decimal("12.90"))
    ProductVariantFactory(product=product, name="Large", price_modifier=Decimal("12.00"))
    return product


@pytest.fixture
def cart_service():
    return CartService(InMemoryCartStorage("osushi_cart:checkout", store={}))


@pytest.fixture
def filled_cart(db_session, product, cart_service):
    """Two standard Sashimi Saumon: subtotal 25.80"""
    snapshot = CatalogService(db_session).get_product(product.id)
    cart_service.add_item(snapshot, quantity=2, special_instructions="Sans wasabi")
    return cart_service


@pytest.fixture
def customer(db_session):
    return CustomerFactory(loyalty_points=480)


@pytest.fixture
def customer_info():
    return CustomerInfo(
        first_name="Hana",
        last_name="Sato",
        phone="0612345678",
        email="hana@example.com",
    )
