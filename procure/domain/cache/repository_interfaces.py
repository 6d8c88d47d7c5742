"""
Cache Repository Interfaces

Abstract store interface following DDD Repository pattern.
Defines the contract every key-value cache store implementation honours.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional

from .value_objects import TTL


class CacheStore(ABC):
    """
    Abstract shared key-value store with per-entry expiry.

    Implementations MUST:
    - treat expired entries as absent on ``get`` and ``scan_batches``
    - overwrite on ``set`` (last write wins)
    - make ``delete`` idempotent
    - raise ``RedisException`` subclasses on connectivity or timeout
      failures instead of blocking indefinitely
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the serialized payload or None when absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: TTL) -> None:
        """Store payload, replacing any existing entry."""
        pass

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete keys and return how many existed."""
        pass

    @abstractmethod
    def scan_batches(self, prefix: str) -> AsyncIterator[List[str]]:
        """
        Yield live keys starting with the literal ``prefix``, one page at a time.

        Callers may delete each page before asking for the next one.
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check store reachability."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the store."""
        pass

    def get_status(self) -> Dict[str, Any]:
        """Store specific status for health reporting."""
        return {"backend": type(self).__name__}
