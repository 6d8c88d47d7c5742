"""
Cache Domain Module

Domain-Driven Design implementation for cache management.
Contains value objects, the TTL policy table, entities and the store interface.
"""

from .entities import CacheEntry
from .repository_interfaces import CacheStore
from .ttl_policy import TTLPolicy, UnknownTTLClassError
from .value_objects import CacheKey, CacheKeyKind, TTL, TTLClass, canonical_params

__all__ = [
    "CacheEntry",
    "CacheStore",
    "TTLPolicy",
    "UnknownTTLClassError",
    "CacheKey",
    "CacheKeyKind",
    "TTL",
    "TTLClass",
    "canonical_params",
]
