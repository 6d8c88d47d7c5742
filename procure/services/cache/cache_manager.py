"""
Cache Manager Service

High-level cache facade that domain handlers talk to. Hides the store wire
format, key conventions and TTL classes, and keeps every store failure on
the fail-open side: reads degrade to misses, writes and invalidations are
logged and skipped.
"""

import asyncio
import json
import logging
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    Optional,
    Type,
    TypeVar,
    Union,
)

from opentelemetry import trace
from pydantic import TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from ...domain.cache.repository_interfaces import CacheStore
from ...domain.cache.ttl_policy import TTLPolicy, TTLSpec
from ...domain.cache.value_objects import (
    CacheKey,
    CacheKeyKind,
    validate_entity_name,
)
from ...domain.procurement.invalidation import InvalidationPlan
from ...constants import KEY_SEPARATOR

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")
KeyLike = Union[str, CacheKey]


class CacheMiss(Enum):
    """Sentinel type for a cache miss, distinct from every JSON value."""

    MISS = "miss"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISS"


MISS = CacheMiss.MISS


@dataclass
class CacheStats:
    """Facade counters for monitoring."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    invalidated_keys: int = 0
    errors: int = 0
    deserialization_failures: int = 0

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        if lookups == 0:
            return 0.0
        return self.hits / lookups


class CacheManager:
    """
    Read-through cache facade.

    Provides get/set/delete on single keys, entity-wide invalidation split
    into single-record and list entries, and a ``get_or_load`` helper that
    implements the read-through flow for handlers.
    """

    def __init__(
        self,
        store: CacheStore,
        ttl_policy: Optional[TTLPolicy] = None,
        enabled: bool = True,
    ):
        self.store = store
        self.ttl_policy = ttl_policy or TTLPolicy.default()
        self.enabled = enabled
        self.stats = CacheStats()

    # Single key operations

    async def get_cache(
        self, key: KeyLike, model: Optional[Type[T]] = None
    ) -> Union[Any, CacheMiss]:
        """
        Get cached value.

        Args:
            key: Cache key
            model: Optional type the payload is validated into

        Returns:
            Decoded value, or MISS when absent, expired, unreadable or when
            the store is unavailable
        """
        cache_key = CacheKey.of(key)
        if not self.enabled:
            return MISS

        with tracer.start_as_current_span("cache_manager.get_cache") as span:
            span.set_attribute("cache.key", cache_key.value)

            try:
                payload = await self.store.get(cache_key.value)
            except Exception as e:
                self.stats.errors += 1
                self.stats.misses += 1
                logger.warning(
                    f"Cache GET failed, falling through to source: {e}",
                    extra={"key": cache_key.value},
                )
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                span.set_attribute("cache.hit", False)
                return MISS

            if payload is None:
                self.stats.misses += 1
                span.set_attribute("cache.hit", False)
                return MISS

            try:
                value = json.loads(payload)
                if model is not None:
                    value = TypeAdapter(model).validate_python(value)
            except (ValueError, TypeError, ValidationError) as e:
                self.stats.deserialization_failures += 1
                self.stats.misses += 1
                logger.warning(
                    f"Discarding unreadable cache entry: {e}",
                    extra={"key": cache_key.value},
                )
                span.set_attribute("cache.hit", False)
                await self._discard(cache_key)
                return MISS

            self.stats.hits += 1
            span.set_attribute("cache.hit", True)
            return value

    async def set_cache(self, key: KeyLike, value: Any, ttl: TTLSpec) -> bool:
        """
        Cache a JSON-serializable value.

        Args:
            key: Cache key
            value: Value to cache (pydantic models and dataclasses allowed)
            ttl: Cache class (TTLClass or its name), TTL, or positive seconds

        Returns:
            True if the store acknowledged the write

        Raises:
            UnknownTTLClassError: If ``ttl`` names an unknown cache class
            ValueError: If ``ttl`` is not a positive integer
        """
        cache_key = CacheKey.of(key)
        # Resolve before any I/O so a misconfigured class always surfaces
        resolved_ttl = self.ttl_policy.resolve(ttl)
        if not self.enabled:
            return False

        with tracer.start_as_current_span("cache_manager.set_cache") as span:
            span.set_attribute("cache.key", cache_key.value)
            span.set_attribute("cache.ttl_seconds", resolved_ttl.seconds)

            try:
                payload = json.dumps(
                    to_jsonable_python(value), separators=(",", ":"), ensure_ascii=False
                )
            except Exception as e:
                self.stats.errors += 1
                logger.error(
                    f"Value for cache key is not JSON serializable: {e}",
                    extra={"key": cache_key.value},
                )
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return False

            try:
                await self.store.set(cache_key.value, payload, resolved_ttl)
            except Exception as e:
                self.stats.errors += 1
                logger.warning(
                    f"Cache SET failed: {e}",
                    extra={"key": cache_key.value, "ttl": resolved_ttl.seconds},
                )
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return False

            self.stats.sets += 1
            logger.debug(
                f"Cached {cache_key.value}",
                extra={"key": cache_key.value, "ttl": resolved_ttl.seconds},
            )
            return True

    async def delete_cache(self, key: KeyLike) -> bool:
        """
        Delete a single cache entry.

        Deleting an absent key is not an error.

        Returns:
            True if the store acknowledged the delete
        """
        cache_key = CacheKey.of(key)
        if not self.enabled:
            return False

        with tracer.start_as_current_span("cache_manager.delete_cache") as span:
            span.set_attribute("cache.key", cache_key.value)

            try:
                removed = await self.store.delete(cache_key.value)
            except Exception as e:
                self.stats.errors += 1
                logger.warning(
                    f"Cache DEL failed: {e}", extra={"key": cache_key.value}
                )
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return False

            self.stats.deletes += removed
            return True

    async def _discard(self, cache_key: CacheKey) -> None:
        try:
            await self.store.delete(cache_key.value)
        except Exception as e:
            self.stats.errors += 1
            logger.warning(
                f"Failed to delete unreadable cache entry: {e}",
                extra={"key": cache_key.value},
            )

    # Entity invalidation

    async def invalidate_entity(self, entity: str) -> int:
        """
        Remove every single-record entry cached under ``entity``.

        Returns:
            Number of keys removed before any store failure
        """
        return await self._invalidate(entity, CacheKeyKind.DETAIL)

    async def invalidate_entity_list(self, entity: str) -> int:
        """
        Remove every list/query entry cached under ``entity``.

        Returns:
            Number of keys removed before any store failure
        """
        return await self._invalidate(entity, CacheKeyKind.LIST)

    async def _invalidate(self, entity: str, kind: CacheKeyKind) -> int:
        validate_entity_name(entity)
        if not self.enabled:
            return 0

        with tracer.start_as_current_span("cache_manager.invalidate") as span:
            span.set_attribute("cache.entity", entity)
            span.set_attribute("cache.kind", kind.value)

            removed = 0
            try:
                # Delete page by page so a timeout keeps the work already done
                async for keys in self.store.scan_batches(entity + KEY_SEPARATOR):
                    targets = [key for key in keys if CacheKey.classify(key) == kind]
                    if targets:
                        removed += await self.store.delete(*targets)
            except Exception as e:
                self.stats.errors += 1
                self.stats.invalidated_keys += removed
                # Remaining stale entries live until their TTL runs out
                logger.error(
                    f"Cache invalidation failed for {entity} ({kind.value}) "
                    f"after removing {removed} keys: {e}",
                    extra={"entity": entity, "kind": kind.value, "count": removed},
                )
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return removed

            self.stats.invalidated_keys += removed
            span.set_attribute("cache.invalidated_count", removed)
            logger.debug(
                f"Invalidated {removed} {kind.value} cache entries for {entity}",
                extra={"entity": entity, "kind": kind.value, "count": removed},
            )
            return removed

    async def invalidate(
        self, plan: InvalidationPlan, record_keys: Iterable[KeyLike] = ()
    ) -> int:
        """
        Apply a write's invalidation fan-out.

        Entity scans run concurrently, so a slow store costs one scan budget
        rather than one per entity.

        Args:
            plan: Entities whose list and single-record entries are affected
            record_keys: Exact detail keys of the written records

        Returns:
            Total number of keys removed by the entity scans
        """
        results = await asyncio.gather(
            *[self.invalidate_entity_list(entity) for entity in plan.lists],
            *[self.invalidate_entity(entity) for entity in plan.details],
        )
        for key in record_keys:
            await self.delete_cache(key)
        return sum(results)

    # Read-through

    async def get_or_load(
        self,
        key: KeyLike,
        loader: Callable[[], Awaitable[T]],
        ttl: TTLSpec,
        model: Optional[Type[T]] = None,
    ) -> T:
        """
        Return the cached value or load, cache and return it.

        ``None`` results are returned but not cached. Exceptions raised by
        ``loader`` propagate unchanged.
        """
        # Validate TTL up front so a bad class fails even on a cache hit
        self.ttl_policy.resolve(ttl)

        cached = await self.get_cache(key, model=model)
        if cached is not MISS:
            return cached

        value = await loader()
        if value is not None:
            await self.set_cache(key, value, ttl)
        return value

    # Monitoring

    async def health_check(self) -> Dict[str, Any]:
        """Report store reachability; never raises."""
        status: Dict[str, Any] = {
            "status": "disabled" if not self.enabled else "unhealthy",
            "timestamp": time.time(),
            "store": self.store.get_status(),
            "ttl_policy": self.ttl_policy.as_dict(),
            "metrics": self.get_metrics(),
        }
        if not self.enabled:
            return status

        try:
            start_time = time.perf_counter()
            reachable = await self.store.ping()
            status["response_time_ms"] = round(
                (time.perf_counter() - start_time) * 1000, 2
            )
            status["status"] = "healthy" if reachable else "unhealthy"
        except Exception as e:
            logger.warning(f"Cache health check failed: {e}")
            status["status"] = "degraded"
            status["error"] = str(e)

        return status

    def get_metrics(self) -> Dict[str, Any]:
        metrics: Dict[str, Any] = asdict(self.stats)
        metrics["hit_rate"] = round(self.stats.hit_rate, 4)
        return metrics

    async def close(self) -> None:
        await self.store.close()
