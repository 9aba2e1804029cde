"""Smoke tests focused on startup-critical components."""

from unittest.mock import patch

import pytest

from app.startup import StartupValidator
from core.config import Settings, validate_production_config


def test_all_routers_mounted(client):
    paths = {route.path for route in client.app.router.routes}

    for expected in [
        "/api/v1/catalog/products",
        "/api/v1/cart",
        "/api/v1/cart/items",
        "/api/v1/orders",
        "/api/v1/orders/{order_id}/status",
        "/api/v1/loyalty/customers/{customer_id}",
        "/api/v1/customers",
        "/health",
    ]:
        assert expected in paths


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["database"]["status"] == "healthy"
    assert data["redis"]["status"] == "disabled"


def test_production_rejects_debug():
    config = Settings(environment="production", debug=True, cart_storage_backend="redis",
                      redis_url="redis://localhost:6379/0")

    with pytest.raises(ValueError, match="DEBUG"):
        validate_production_config(config)


def test_production_requires_redis_url_for_redis_carts():
    config = Settings(environment="production", debug=False, cart_storage_backend="redis",
                      redis_url=None)

    with pytest.raises(ValueError, match="REDIS_URL"):
        validate_production_config(config)


def test_settings_parse_cors_origins():
    config = Settings(cors_origins="https://osushi.fr, https://www.osushi.fr")

    assert config.cors_origins == ["https://osushi.fr", "https://www.osushi.fr"]


def test_startup_validator_flags_missing_redis():
    with patch("app.startup.settings") as mock_settings, \
            patch("app.startup.get_redis_client", return_value=None):
        mock_settings.cart_storage_backend = "redis"

        validator = StartupValidator()
        assert validator.check_redis_connection() is False

    assert validator.errors
