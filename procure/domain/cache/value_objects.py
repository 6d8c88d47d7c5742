"""
Cache Value Objects

Immutable value objects for cache domain following DDD principles.
Provides type safety and key/TTL conventions for cache operations.
"""

import hashlib
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from ...constants import (
    DETAIL_QUALIFIERS,
    HASHED_SEGMENT_PREFIX,
    KEY_SEPARATOR,
    MAX_INLINE_PARAMS_LENGTH,
    MAX_KEY_LENGTH,
)


class TTLClass(str, Enum):
    """Semantic cache classes mapped to durations by the TTL policy."""

    STATIC = "STATIC"  # country/state/city reference lists
    MASTER_DATA = "MASTER_DATA"  # vendors, items, categories
    TRANSACTIONAL = "TRANSACTIONAL"  # DMR entries, imprest entries, orders
    DASHBOARD = "DASHBOARD"  # aggregate counts
    PROJECT = "PROJECT"  # project lists and details


class CacheKeyKind(str, Enum):
    """Shape of a cache key, used to scope invalidation."""

    LIST = "list"
    DETAIL = "detail"


def validate_entity_name(entity: str) -> str:
    """Validate an entity prefix used in cache keys."""
    if not isinstance(entity, str) or not entity:
        raise ValueError("Cache entity name cannot be empty")
    if KEY_SEPARATOR in entity:
        raise ValueError(f"Cache entity name cannot contain '{KEY_SEPARATOR}'")
    return entity


def canonical_params(params: Optional[Mapping[str, Any]]) -> str:
    """Serialize query parameters deterministically.

    Keys are sorted at every nesting level and ``None`` values at the top
    level are dropped, so ``{"page": 1, "q": None}`` and ``{"page": 1}``
    address the same entry.
    """
    cleaned = {k: v for k, v in (params or {}).items() if v is not None}
    return json.dumps(
        cleaned, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str
    )


def _hashed_segment(text: str) -> str:
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
    return f"{HASHED_SEGMENT_PREFIX}{digest}"


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    List keys: ``<ENTITY>:<OPERATION>:<canonical params>``.
    Detail keys: ``<ENTITY>:<ID>`` or ``<ENTITY>:DETAILS:<ID>``.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > MAX_KEY_LENGTH:
            raise ValueError(f"Cache key too long (max {MAX_KEY_LENGTH} characters)")

        if self.value.startswith(KEY_SEPARATOR):
            raise ValueError("Cache key must start with an entity name")

    @classmethod
    def of(cls, key: Union[str, "CacheKey"]) -> "CacheKey":
        """Coerce a raw string into a key."""
        if isinstance(key, CacheKey):
            return key
        return cls(key)

    @classmethod
    def for_list(
        cls,
        entity: str,
        operation: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> "CacheKey":
        """Create list/query cache key from request parameters."""
        validate_entity_name(entity)
        if not operation or KEY_SEPARATOR in operation:
            raise ValueError("Invalid cache operation name")
        if operation.upper() in DETAIL_QUALIFIERS:
            raise ValueError(f"'{operation}' is reserved for detail keys")

        serialized = canonical_params(params)
        if len(serialized) > MAX_INLINE_PARAMS_LENGTH:
            serialized = _hashed_segment(serialized)

        return cls(KEY_SEPARATOR.join((entity, operation, serialized)))

    @classmethod
    def for_detail(
        cls, entity: str, record_id: Any, qualifier: Optional[str] = None
    ) -> "CacheKey":
        """Create single-record cache key.

        Record ids come from request input. An id that cannot be embedded
        as is (for example one that would make the key list-shaped) is
        replaced by a digest instead of being rejected.
        """
        validate_entity_name(entity)
        if qualifier is not None and qualifier.upper() not in DETAIL_QUALIFIERS:
            raise ValueError(f"Invalid detail qualifier: {qualifier}")

        record = str(record_id)
        if (
            not record
            or len(record) > MAX_INLINE_PARAMS_LENGTH
            or (qualifier is None and KEY_SEPARATOR in record)
        ):
            record = _hashed_segment(record)

        if qualifier is None:
            return cls(KEY_SEPARATOR.join((entity, record)))
        return cls(KEY_SEPARATOR.join((entity, qualifier, record)))

    @property
    def entity(self) -> str:
        """Entity prefix the key was produced under."""
        return self.value.split(KEY_SEPARATOR, 1)[0]

    @staticmethod
    def classify(value: str) -> CacheKeyKind:
        """Classify a raw key string as a list or single-record entry."""
        parts = value.split(KEY_SEPARATOR, 2)
        if len(parts) <= 2:
            return CacheKeyKind.DETAIL
        if parts[1].upper() in DETAIL_QUALIFIERS:
            return CacheKeyKind.DETAIL
        return CacheKeyKind.LIST

    @property
    def kind(self) -> CacheKeyKind:
        """Classify the key as a list or single-record entry."""
        return CacheKey.classify(self.value)

    def belongs_to(self, entity: str) -> bool:
        """Check whether the key was produced under ``entity``."""
        return self.entity == entity

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.

    Provides type-safe TTL configuration with validation.
    """

    seconds: int

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if isinstance(self.seconds, bool) or not isinstance(self.seconds, int):
            raise ValueError("TTL must be an integer number of seconds")
        if self.seconds <= 0:
            raise ValueError("TTL must be positive")
        if self.seconds > 86400 * 365:  # Max 1 year
            raise ValueError("TTL too large (max 1 year)")

    @classmethod
    def of_seconds(cls, seconds: int) -> "TTL":
        """Create TTL from seconds."""
        return cls(seconds)

    @classmethod
    def minutes(cls, minutes: int) -> "TTL":
        """Create TTL from minutes."""
        return cls(minutes * 60)

    @classmethod
    def hours(cls, hours: int) -> "TTL":
        """Create TTL from hours."""
        return cls(hours * 3600)

    @classmethod
    def days(cls, days: int) -> "TTL":
        """Create TTL from days."""
        return cls(days * 86400)

    def __str__(self) -> str:
        return f"{self.seconds}s"
