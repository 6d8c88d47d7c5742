"""
DMR Entry Handler

Material receipt entries change throughout the working day, so their
reads use the transactional TTL class.
"""

from typing import Any, Dict, List, Mapping, Optional

from ...domain.cache.value_objects import TTLClass
from ...domain.procurement.entities import CacheEntity, RecordNotFoundError
from ...domain.procurement.repository_interfaces import DmrEntryRepository
from ..cache.cache_manager import CacheManager
from .base import CachedQueryHandler


class DmrEntryHandler(CachedQueryHandler):
    entity = CacheEntity.DMR_ENTRY
    ttl_class = TTLClass.TRANSACTIONAL
    detail_qualifier = "DETAILS"

    def __init__(self, cache: CacheManager, repository: DmrEntryRepository):
        super().__init__(cache)
        self.repository = repository

    async def get_list(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        return await self.cached(
            self.list_key("LIST", params),
            lambda: self.repository.find_list(params),
        )

    async def status_counts(self, params: Mapping[str, Any]) -> Dict[str, int]:
        return await self.cached(
            self.list_key("STATUS_COUNT", params),
            lambda: self.repository.status_counts(params),
        )

    async def open_challans(self, po_number: str) -> List[Dict[str, Any]]:
        return await self.cached(
            self.list_key("OPENCHALLAN", {"poNumber": po_number}),
            lambda: self.repository.open_challans(po_number),
        )

    async def get_details(self, entry_id: str) -> Optional[Dict[str, Any]]:
        return await self.cached(
            self.detail_key(entry_id),
            lambda: self.repository.find_by_id(entry_id),
        )

    async def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        entry = await self.repository.insert(data)
        await self.after_write("dmr_entry.create")
        return entry

    async def update(self, entry_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        entry = await self.repository.update(entry_id, changes)
        if entry is None:
            raise RecordNotFoundError(self.entity, entry_id)
        await self.after_write("dmr_entry.update", [entry_id])
        return entry

    async def delete(self, entry_id: str) -> None:
        if not await self.repository.delete(entry_id):
            raise RecordNotFoundError(self.entity, entry_id)
        await self.after_write("dmr_entry.delete", [entry_id])
