"""
Pytest configuration file for backend testing.
"""
import os
import sys
from pathlib import Path

# Point the engine at a throwaway database before core.database is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("AUTH_MODE", "header")

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest
from fastapi.testclient import TestClient

from core.database import Base, SessionLocal, engine, get_db

# Import all models to ensure SQLAlchemy relationships work
from modules.catalog.models import catalog_models  # noqa: F401
from modules.customers.models import customer_models  # noqa: F401
from modules.orders.models import order_models  # noqa: F401
from modules.loyalty.models import loyalty_models  # noqa: F401

from modules.cart.storage import cart_storage
from tests.factories.base import BaseFactory


@pytest.fixture
def db_session():
    """Fresh schema and session per test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    BaseFactory.use_session(session)
    try:
        yield session
    finally:
        BaseFactory.use_session(None)
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Test client sharing the test session with the routes"""
    from app.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_memory_carts():
    cart_storage._memory_carts.clear()
    yield
    cart_storage._memory_carts.clear()
