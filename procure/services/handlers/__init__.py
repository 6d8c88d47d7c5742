"""
Domain Query Handlers

Cached read paths and invalidate-after-write discipline for the
procurement entities.
"""

from .base import CachedQueryHandler
from .dashboard import DashboardHandler
from .dmr_entry import DmrEntryHandler
from .geo import GeoHandler
from .imprest_dmr import ImprestDmrHandler
from .vendor import VendorHandler

__all__ = [
    "CachedQueryHandler",
    "DashboardHandler",
    "DmrEntryHandler",
    "GeoHandler",
    "ImprestDmrHandler",
    "VendorHandler",
]
