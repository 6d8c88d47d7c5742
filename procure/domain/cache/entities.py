"""
Cache Domain Entities

Core domain entities for cache management following DDD principles.
Encapsulates expiry invariants for stored cache entries.
"""

from dataclasses import dataclass

from .value_objects import CacheKey, TTL


@dataclass
class CacheEntry:
    """
    Cache entry entity.

    Holds a serialized payload together with its absolute expiry. An entry
    at or past ``expires_at`` is treated exactly like an absent one.
    """

    key: CacheKey
    value: str
    created_at: float
    expires_at: float

    @classmethod
    def create(cls, key: CacheKey, value: str, ttl: TTL, now: float) -> "CacheEntry":
        """Create new cache entry expiring ``ttl`` seconds after ``now``."""
        return cls(key=key, value=value, created_at=now, expires_at=now + ttl.seconds)

    def is_expired(self, now: float) -> bool:
        """Check if cache entry is expired."""
        return now >= self.expires_at

    def remaining_ttl(self, now: float) -> float:
        """Seconds left before expiry (never negative)."""
        return max(0.0, self.expires_at - now)
