# backend/modules/cart/storage/cart_storage.py

"""
Storage ports for the serialized cart.

A storage instance is bound to exactly one cart (one session); the cart
service never sees keys, only ``get``/``set``/``clear``.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging
import re

from redis import Redis
from redis.exceptions import RedisError

from core.config import settings
from core.error_handling import APIValidationError, ConfigurationError, PersistenceError
from core.redis_config import RedisConfig, get_redis_client

logger = logging.getLogger(__name__)

SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")

# Process-local carts used by the in-memory backend
_memory_carts: Dict[str, str] = {}


class CartStorage(ABC):
    """Persistence port for one serialized cart"""

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the stored representation, or None when absent."""

    @abstractmethod
    def set(self, value: str) -> None:
        """Durably store the representation."""

    @abstractmethod
    def clear(self) -> None:
        """Drop the stored representation."""


class InMemoryCartStorage(CartStorage):
    def __init__(self, key: str, store: Optional[Dict[str, str]] = None):
        self.key = key
        self.store = _memory_carts if store is None else store

    def get(self) -> Optional[str]:
        return self.store.get(self.key)

    def set(self, value: str) -> None:
        self.store[self.key] = value

    def clear(self) -> None:
        self.store.pop(self.key, None)


class RedisCartStorage(CartStorage):
    """Cart kept in Redis under one key with a sliding expiry"""

    def __init__(self, client: Redis, key: str, ttl_seconds: Optional[int] = None):
        self.client = client
        self.key = key
        self.ttl_seconds = ttl_seconds

    def get(self) -> Optional[str]:
        try:
            value = self.client.get(self.key)
        except RedisError as e:
            # An unreadable cart is treated as an empty one
            logger.warning(f"Could not read cart {self.key} from Redis: {e}")
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        return value

    def set(self, value: str) -> None:
        try:
            self.client.set(self.key, value, ex=self.ttl_seconds)
        except RedisError as e:
            logger.error(f"Could not persist cart {self.key} to Redis: {e}")
            raise PersistenceError("Could not save the cart", step="save_cart")

    def clear(self) -> None:
        try:
            self.client.delete(self.key)
        except RedisError as e:
            logger.error(f"Could not clear cart {self.key} in Redis: {e}")
            raise PersistenceError("Could not clear the cart", step="clear_cart")


def cart_key(session_id: str) -> str:
    if not SESSION_ID_PATTERN.match(session_id or ""):
        raise APIValidationError(
            "Invalid cart session identifier", {"session_id": session_id}
        )
    return f"{settings.cart_storage_key}:{session_id}"


def get_cart_storage(session_id: str) -> CartStorage:
    """Build the configured storage backend for one session."""
    key = cart_key(session_id)

    if settings.cart_storage_backend == "redis":
        redis_config = RedisConfig.from_settings(settings)
        client = get_redis_client(redis_config)
        if client is None:
            raise ConfigurationError(
                "Cart storage is unavailable", {"backend": "redis"}
            )
        return RedisCartStorage(
            client, redis_config.cart_key(session_id), redis_config.cart_ttl_seconds
        )

    if settings.cart_storage_backend == "memory":
        return InMemoryCartStorage(key)

    raise ConfigurationError(
        "Unknown cart storage backend", {"backend": settings.cart_storage_backend}
    )
