# backend/core/redis_config.py

"""
Redis connection management for the cart store.

``RedisConfig`` gathers everything the Redis cart backend needs: where to
connect, how the pool behaves, and how carts are keyed and expired.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
import redis
from redis import Redis
from redis.exceptions import RedisError
import logging

from core.config import Settings, settings

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


@dataclass(frozen=True)
class RedisConfig:
    """Connection and cart-keying options for the Redis cart backend"""

    url: str = DEFAULT_REDIS_URL
    max_connections: int = 10
    socket_timeout: int = 5
    health_check_interval: int = 30
    cart_key_prefix: str = "osushi_cart"
    cart_ttl_seconds: Optional[int] = None

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "RedisConfig":
        config = config or settings
        return cls(
            url=config.redis_url or DEFAULT_REDIS_URL,
            cart_key_prefix=config.cart_storage_key,
            cart_ttl_seconds=config.cart_ttl_seconds,
        )

    def cart_key(self, session_id: str) -> str:
        return f"{self.cart_key_prefix}:{session_id}"

    def connection_pool(self) -> redis.ConnectionPool:
        return redis.ConnectionPool.from_url(
            self.url,
            max_connections=self.max_connections,
            decode_responses=True,
            socket_timeout=self.socket_timeout,
            socket_connect_timeout=self.socket_timeout,
            health_check_interval=self.health_check_interval,
        )


_redis_client: Optional[Redis] = None
_connection_pool: Optional[redis.ConnectionPool] = None


def _connect(config: RedisConfig) -> Optional[Redis]:
    global _redis_client, _connection_pool

    _connection_pool = config.connection_pool()
    client = Redis(connection_pool=_connection_pool)
    try:
        client.ping()
    except RedisError as e:
        logger.warning(f"Cart store Redis at {config.url} unreachable: {e}")
        _connection_pool = None
        return None

    logger.info("Cart store connected to Redis")
    _redis_client = client
    return client


def get_redis_client(config: Optional[RedisConfig] = None) -> Optional[Redis]:
    """Shared client for the cart store, or None while Redis is unreachable."""
    global _redis_client

    if _redis_client is not None:
        try:
            _redis_client.ping()
            return _redis_client
        except RedisError as e:
            logger.warning(f"Lost cart store Redis connection, reconnecting: {e}")
            _redis_client = None

    return _connect(config or RedisConfig.from_settings())


def close_redis_connection():
    global _redis_client, _connection_pool

    client, pool = _redis_client, _connection_pool
    _redis_client, _connection_pool = None, None

    try:
        if client is not None:
            client.close()
        if pool is not None:
            pool.disconnect()
    except RedisError as e:
        logger.error(f"Error closing cart store Redis connection: {e}")


def redis_health_check() -> Dict[str, Any]:
    """Health summary for /health; carts in memory report Redis as disabled"""
    if not settings.redis_enabled:
        return {"status": "disabled", "message": "Redis is not configured"}

    client = get_redis_client()
    if client is None:
        return {"status": "unavailable", "message": "Redis connection not available"}

    try:
        info = client.info()
    except RedisError as e:
        return {"status": "unhealthy", "message": f"Redis health check failed: {e}"}

    return {
        "status": "healthy",
        "message": "Redis connection healthy",
        "details": {
            "version": info.get("redis_version"),
            "used_memory_human": info.get("used_memory_human"),
        },
    }
