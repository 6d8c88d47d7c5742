"""
Imprest DMR Handler

Imprest receipts feed DMR entries and DMR purchase orders, so every write
fans out to all three entity families.
"""

from typing import Any, Dict, Mapping, Optional

from ...domain.cache.value_objects import TTLClass
from ...domain.procurement.entities import CacheEntity, RecordNotFoundError
from ...domain.procurement.repository_interfaces import DocumentRepository
from ..cache.cache_manager import CacheManager
from .base import CachedQueryHandler


class ImprestDmrHandler(CachedQueryHandler):
    entity = CacheEntity.DMR_IMPREST
    ttl_class = TTLClass.TRANSACTIONAL
    detail_qualifier = "DETAILS"

    def __init__(self, cache: CacheManager, repository: DocumentRepository):
        super().__init__(cache)
        self.repository = repository

    async def get_list(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        return await self.cached(
            self.list_key("LIST", params),
            lambda: self.repository.find_list(params),
        )

    async def get_details(self, entry_id: str) -> Optional[Dict[str, Any]]:
        return await self.cached(
            self.detail_key(entry_id),
            lambda: self.repository.find_by_id(entry_id),
        )

    async def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        entry = await self.repository.insert(data)
        await self.after_write("imprest_dmr.create")
        return entry

    async def update(self, entry_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        entry = await self.repository.update(entry_id, changes)
        if entry is None:
            raise RecordNotFoundError(self.entity, entry_id)
        await self.after_write("imprest_dmr.update", [entry_id])
        return entry

    async def delete(self, entry_id: str) -> None:
        if not await self.repository.delete(entry_id):
            raise RecordNotFoundError(self.entity, entry_id)
        await self.after_write("imprest_dmr.delete", [entry_id])
