"""
Cache Services Module

Application-facing cache facade.
"""

from .cache_manager import CacheManager, CacheMiss, CacheStats, MISS

__all__ = ["CacheManager", "CacheMiss", "CacheStats", "MISS"]
