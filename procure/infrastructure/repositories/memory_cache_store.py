"""
In-Memory Cache Store

Process-local CacheStore used by tests and single-process development
setups. Not suitable for horizontally scaled deployments: invalidation is
only visible inside the owning process.
"""

from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from ...constants import monotonic_clock
from ...domain.cache.entities import CacheEntry
from ...domain.cache.repository_interfaces import CacheStore
from ...domain.cache.value_objects import CacheKey, TTL


class InMemoryCacheStore(CacheStore):
    """Dictionary-backed cache store with an injectable clock."""

    def __init__(
        self, clock: Callable[[], float] = monotonic_clock, batch_size: int = 100
    ):
        self._clock = clock
        self.batch_size = batch_size
        self._entries: Dict[str, CacheEntry] = {}

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[str]:
        entry = self._live_entry(key)
        return entry.value if entry else None

    async def set(self, key: str, value: str, ttl: TTL) -> None:
        self._entries[key] = CacheEntry.create(CacheKey(key), value, ttl, self._clock())

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self._live_entry(key) is not None:
                del self._entries[key]
                removed += 1
        return removed

    async def scan_batches(self, prefix: str) -> AsyncIterator[List[str]]:
        matching = [key for key in list(self._entries) if key.startswith(prefix)]
        for start in range(0, len(matching), self.batch_size):
            page = [
                key
                for key in matching[start : start + self.batch_size]
                if self._live_entry(key) is not None
            ]
            if page:
                yield page

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._entries.clear()

    def ttl(self, key: str) -> Optional[float]:
        """Remaining lifetime of ``key`` or None when absent."""
        entry = self._live_entry(key)
        return entry.remaining_ttl(self._clock()) if entry else None

    def __len__(self) -> int:
        return len([key for key in list(self._entries) if self._live_entry(key)])

    def get_status(self) -> Dict[str, Any]:
        return {"backend": "memory", "entries": len(self)}
