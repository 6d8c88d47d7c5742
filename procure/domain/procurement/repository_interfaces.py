"""
Procurement Repository Interfaces

Ports onto the authoritative document store. The cache never holds data
these repositories cannot regenerate.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

Document = Dict[str, Any]


class DocumentRepository(ABC):
    """Generic CRUD port for one collection."""

    @abstractmethod
    async def find_list(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Return a filtered, paginated listing (``{"data": [...], "total": n}``)."""
        pass

    @abstractmethod
    async def find_by_id(self, record_id: str) -> Optional[Document]:
        """Return one record or None."""
        pass

    @abstractmethod
    async def insert(self, document: Mapping[str, Any]) -> Document:
        """Insert and return the stored record."""
        pass

    @abstractmethod
    async def update(
        self, record_id: str, changes: Mapping[str, Any]
    ) -> Optional[Document]:
        """Apply changes and return the updated record, or None if absent."""
        pass

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Delete a record, returning whether it existed."""
        pass


class DmrEntryRepository(DocumentRepository):
    """DMR entry collection with status and challan queries."""

    @abstractmethod
    async def status_counts(self, params: Mapping[str, Any]) -> Dict[str, int]:
        pass

    @abstractmethod
    async def open_challans(self, po_number: str) -> List[Document]:
        pass


class GeoRepository(ABC):
    """Country / state / city reference data."""

    @abstractmethod
    async def countries(self) -> List[Document]:
        pass

    @abstractmethod
    async def states(self, country_code: str) -> List[Document]:
        pass

    @abstractmethod
    async def cities(self, state_code: str) -> List[Document]:
        pass

    @abstractmethod
    async def city(self, city_code: str) -> Optional[Document]:
        pass


class DashboardRepository(ABC):
    """Aggregate counts shown on the dashboard."""

    @abstractmethod
    async def counts(self) -> Dict[str, int]:
        pass
