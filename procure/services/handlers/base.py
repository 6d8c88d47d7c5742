"""
Cached Query Handler Base

Shared read-through and invalidation plumbing for domain handlers.
"""

import logging
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, TypeVar, Union

from opentelemetry import trace

from ...domain.cache.value_objects import CacheKey, TTLClass, validate_entity_name
from ...domain.procurement.invalidation import plan_for
from ..cache.cache_manager import CacheManager

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


class CachedQueryHandler:
    """
    Base class for handlers that cache their reads.

    Subclasses set ``entity`` and ``ttl_class``; both are validated at
    construction so a misconfigured handler fails at startup.
    """

    entity: str = ""
    ttl_class: Union[TTLClass, str] = TTLClass.TRANSACTIONAL
    detail_qualifier: Optional[str] = None

    def __init__(self, cache: CacheManager):
        validate_entity_name(self.entity)
        cache.ttl_policy.validate_classes([self.ttl_class])
        self.cache = cache

    def list_key(
        self, operation: str, params: Optional[Mapping[str, Any]] = None
    ) -> Optional[CacheKey]:
        """Build a list key, or None when the query cannot be cached."""
        try:
            return CacheKey.for_list(self.entity, operation, params)
        except (TypeError, ValueError) as e:
            logger.warning(
                f"Uncacheable {self.entity} query, bypassing cache: {e}",
                extra={"entity": self.entity, "operation": operation},
            )
            return None

    def detail_key(self, record_id: Any) -> Optional[CacheKey]:
        """Build a single-record key, or None when it cannot be built."""
        try:
            return CacheKey.for_detail(self.entity, record_id, self.detail_qualifier)
        except (TypeError, ValueError) as e:
            logger.warning(
                f"Uncacheable {self.entity} record id, bypassing cache: {e}",
                extra={"entity": self.entity},
            )
            return None

    async def cached(
        self, key: Optional[CacheKey], loader: Callable[[], Awaitable[T]]
    ) -> T:
        """Read-through under the handler's TTL class."""
        if key is None:
            return await loader()

        with tracer.start_as_current_span(f"handler.{self.entity}.read") as span:
            span.set_attribute("cache.key", key.value)
            return await self.cache.get_or_load(key, loader, self.ttl_class)

    async def after_write(
        self, write_operation: str, record_ids: Iterable[Any] = ()
    ) -> int:
        """
        Invalidate everything a completed write may have made stale.

        Cache failures are logged by the facade and never undo the write.
        """
        plan = plan_for(write_operation)
        record_keys = [
            key
            for key in (self.detail_key(record_id) for record_id in record_ids)
            if key is not None
        ]
        removed = await self.cache.invalidate(plan, record_keys)
        logger.debug(
            f"{write_operation} invalidated {removed} cache entries",
            extra={"write_operation": write_operation, "entities": list(plan.entities)},
        )
        return removed
