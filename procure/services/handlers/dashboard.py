"""
Dashboard Handler

Aggregate counts are bounded by the DASHBOARD TTL only; no write
invalidates them.
"""

from typing import Dict

from ...domain.cache.value_objects import TTLClass
from ...domain.procurement.entities import CacheEntity
from ...domain.procurement.repository_interfaces import DashboardRepository
from ..cache.cache_manager import CacheManager
from .base import CachedQueryHandler


class DashboardHandler(CachedQueryHandler):
    entity = CacheEntity.DASHBOARD
    ttl_class = TTLClass.DASHBOARD

    def __init__(self, cache: CacheManager, repository: DashboardRepository):
        super().__init__(cache)
        self.repository = repository

    async def counts(self) -> Dict[str, int]:
        return await self.cached(self.list_key("counts"), self.repository.counts)
