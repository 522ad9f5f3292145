"""Redis cache client and key helpers."""
from .client import CacheManager, CacheConfig
from .keys import MessageCacheKeys, escape_glob

__all__ = ["CacheManager", "CacheConfig", "MessageCacheKeys", "escape_glob"]
