"""
Vendor Handler

Vendor master data: cached listing and detail reads, invalidation after
create, update and delete.
"""

from typing import Any, Dict, Mapping, Optional

from ...domain.cache.value_objects import TTLClass
from ...domain.procurement.entities import CacheEntity, RecordNotFoundError
from ...domain.procurement.repository_interfaces import DocumentRepository
from ..cache.cache_manager import CacheManager
from .base import CachedQueryHandler


class VendorHandler(CachedQueryHandler):
    entity = CacheEntity.VENDOR
    ttl_class = TTLClass.MASTER_DATA

    def __init__(self, cache: CacheManager, repository: DocumentRepository):
        super().__init__(cache)
        self.repository = repository

    async def get_list(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        return await self.cached(
            self.list_key("getList", params),
            lambda: self.repository.find_list(params),
        )

    async def get_details(self, vendor_id: str) -> Optional[Dict[str, Any]]:
        return await self.cached(
            self.detail_key(vendor_id),
            lambda: self.repository.find_by_id(vendor_id),
        )

    async def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        vendor = await self.repository.insert(data)
        await self.after_write("vendor.create")
        return vendor

    async def update(self, vendor_id: str, changes: Mapping[str, Any]) -> Dict[str, Any]:
        vendor = await self.repository.update(vendor_id, changes)
        if vendor is None:
            raise RecordNotFoundError(self.entity, vendor_id)
        await self.after_write("vendor.update", [vendor_id])
        return vendor

    async def delete(self, vendor_id: str) -> None:
        if not await self.repository.delete(vendor_id):
            raise RecordNotFoundError(self.entity, vendor_id)
        await self.after_write("vendor.delete", [vendor_id])
