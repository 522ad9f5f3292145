"""
Redis cache client.

Thin async wrapper over redis.asyncio that the message services use for
their read-through cache. Values are stored as strings; serialization is
the caller's concern.
"""
import logging
from typing import Optional, Protocol, runtime_checkable
from redis.asyncio import Redis, ConnectionPool
from redis.exceptions import RedisError

from ..core.exceptions import CacheError, CacheConnectionError

logger = logging.getLogger(__name__)


@runtime_checkable
class CacheConfig(Protocol):
    """Protocol for cache configuration."""

    @property
    def is_cache_enabled(self) -> bool:
        """Whether cache is enabled."""
        ...

    @property
    def redis_url(self) -> Optional[str]:
        """Redis connection URL."""
        ...

    @property
    def redis_pool_size(self) -> int:
        """Redis connection pool size."""
        ...

    @property
    def redis_decode_responses(self) -> bool:
        """Whether to decode Redis responses."""
        ...

    def get_cache_key_prefix(self) -> str:
        """Get cache key prefix."""
        ...


class CacheManager:
    """Manages Redis cache operations.

    When Redis is not configured every read is a miss and every write is a
    no-op. Once configured, Redis failures are raised as ``CacheError`` and
    left to the caller to handle.
    """

    def __init__(self, config: Optional[CacheConfig] = None, redis_client: Optional[Redis] = None):
        self.config = config
        self.redis_client: Optional[Redis] = redis_client
        self.pool: Optional[ConnectionPool] = None
        self.key_prefix = config.get_cache_key_prefix() if config else ""
        self.is_available = redis_client is not None

    async def connect(self) -> Optional[Redis]:
        """Create and return the Redis connection.

        Returns None if Redis is not configured.
        """
        if self.redis_client is not None:
            return self.redis_client

        if not self.config or not self.config.is_cache_enabled:
            logger.info("REDIS_URL not configured, running without message cache")
            return None

        try:
            logger.info("Creating Redis connection pool...")
            self.pool = ConnectionPool.from_url(
                str(self.config.redis_url),
                max_connections=self.config.redis_pool_size,
                decode_responses=self.config.redis_decode_responses,
                health_check_interval=30
            )
            self.redis_client = Redis(connection_pool=self.pool)
            await self.redis_client.ping()
        except (RedisError, OSError) as e:
            await self._reset()
            raise CacheConnectionError(f"Redis connection failed: {e}") from e

        self.is_available = True
        logger.info("Redis connection established successfully")
        return self.redis_client

    async def _reset(self) -> None:
        if self.pool:
            await self.pool.disconnect()
        self.redis_client = None
        self.pool = None
        self.is_available = False

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            if self.pool:
                await self.pool.disconnect()
            self.redis_client = None
            self.pool = None
            self.is_available = False
            logger.info("Redis connection closed")

    def _make_key(self, key: str) -> str:
        """Apply the configured prefix to a key or pattern."""
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        """Get a value from cache, None on miss."""
        if not self.redis_client:
            return None

        full_key = self._make_key(key)
        try:
            value = await self.redis_client.get(full_key)
        except RedisError as e:
            raise CacheError(f"Cache get failed: {e}", key=full_key) from e

        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl: int) -> bool:
        """Store a value with a fixed time-to-live in seconds."""
        if not self.redis_client:
            return False

        full_key = self._make_key(key)
        try:
            await self.redis_client.setex(full_key, ttl, value)
        except RedisError as e:
            raise CacheError(f"Cache set failed: {e}", key=full_key) from e
        return True

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern, returning the count."""
        if not self.redis_client:
            return 0

        full_pattern = self._make_key(pattern)
        try:
            keys = [key async for key in self.redis_client.scan_iter(match=full_pattern)]
            if not keys:
                return 0
            return await self.redis_client.delete(*keys)
        except RedisError as e:
            raise CacheError(f"Cache pattern delete failed: {e}", key=full_pattern) from e

    async def health_check(self) -> bool:
        """Check Redis health."""
        if not self.redis_client:
            return False

        try:
            return bool(await self.redis_client.ping())
        except RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False
