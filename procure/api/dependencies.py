"""
FastAPI dependencies shared by the routers.
"""

from typing import Optional

from fastapi import Request

from ..services.cache.cache_manager import CacheManager


def get_cache_manager(request: Request) -> Optional[CacheManager]:
    """Return the process-wide cache facade built during startup."""
    return getattr(request.app.state, "cache_manager", None)
