"""Cache store implementations."""

from .memory_cache_store import InMemoryCacheStore
from .redis_cache_store import RedisCacheStore

__all__ = ["InMemoryCacheStore", "RedisCacheStore"]
