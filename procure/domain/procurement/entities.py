"""
Procurement Domain Entities

Entity prefixes used in cache keys and the handler-level error taxonomy.
"""

from typing import Any


class CacheEntity:
    """Entity prefixes for cache keys.

    Values are kept exactly as the running system writes them so that
    existing keys stay addressable.
    """

    VENDOR = "vendor"
    DMR_ENTRY = "DMRENTRY"
    DMR_IMPREST = "DMRIMPREST"
    DMR_ORDER = "DMRORDER"
    GEO = "geo"
    DASHBOARD = "dashboard"


class RecordNotFoundError(LookupError):
    """Raised when a handler is asked to change a record that does not exist."""

    def __init__(self, entity: str, record_id: Any):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} record not found: {record_id}")
