"""
Geo Lookup Handler

Country, state and city reference lists; only a deploy changes them.
"""

from typing import Any, Dict, List, Optional

from ...domain.cache.value_objects import TTLClass
from ...domain.procurement.entities import CacheEntity
from ...domain.procurement.repository_interfaces import GeoRepository
from ..cache.cache_manager import CacheManager
from .base import CachedQueryHandler


class GeoHandler(CachedQueryHandler):
    entity = CacheEntity.GEO
    ttl_class = TTLClass.STATIC

    def __init__(self, cache: CacheManager, repository: GeoRepository):
        super().__init__(cache)
        self.repository = repository

    async def countries(self) -> List[Dict[str, Any]]:
        return await self.cached(self.list_key("countries"), self.repository.countries)

    async def states(self, country_code: str) -> List[Dict[str, Any]]:
        code = country_code.upper()
        return await self.cached(
            self.list_key("states", {"countryCode": code}),
            lambda: self.repository.states(code),
        )

    async def cities(self, state_code: str) -> List[Dict[str, Any]]:
        return await self.cached(
            self.list_key("cities", {"stateCode": state_code}),
            lambda: self.repository.cities(state_code),
        )

    async def city(self, city_code: str) -> Optional[Dict[str, Any]]:
        return await self.cached(
            self.list_key("city", {"cityCode": city_code}),
            lambda: self.repository.city(city_code),
        )
