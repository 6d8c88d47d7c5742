"""
Write Invalidation Fan-out

Every write that can affect cached reads declares here which entities'
list and single-record entries it invalidates. Cross-entity effects are
listed explicitly; nothing is inferred.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from ..cache.value_objects import validate_entity_name
from .entities import CacheEntity


@dataclass(frozen=True)
class InvalidationPlan:
    """Entities whose list and single-record cache entries a write touches."""

    lists: Tuple[str, ...] = ()
    details: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for entity in self.lists + self.details:
            validate_entity_name(entity)

    @property
    def entities(self) -> Tuple[str, ...]:
        seen = dict.fromkeys(self.lists + self.details)
        return tuple(seen)


_DMR_FAMILY = (CacheEntity.DMR_IMPREST, CacheEntity.DMR_ORDER, CacheEntity.DMR_ENTRY)

# An entry feeds the order it belongs to and the imprest sheet that pays for it
_DMR_ENTRY_PLAN = InvalidationPlan(
    lists=(CacheEntity.DMR_ENTRY, CacheEntity.DMR_ORDER, CacheEntity.DMR_IMPREST),
    details=(CacheEntity.DMR_ORDER, CacheEntity.DMR_IMPREST),
)

# The written record's own detail key is deleted by the handler in addition
# to the plan, so updates do not need to wipe unrelated detail entries.
WRITE_INVALIDATIONS: Dict[str, InvalidationPlan] = {
    "vendor.create": InvalidationPlan(lists=(CacheEntity.VENDOR,)),
    "vendor.update": InvalidationPlan(lists=(CacheEntity.VENDOR,)),
    "vendor.delete": InvalidationPlan(lists=(CacheEntity.VENDOR,)),
    "dmr_entry.create": _DMR_ENTRY_PLAN,
    "dmr_entry.update": _DMR_ENTRY_PLAN,
    "dmr_entry.delete": _DMR_ENTRY_PLAN,
    "imprest_dmr.create": InvalidationPlan(lists=_DMR_FAMILY, details=_DMR_FAMILY),
    "imprest_dmr.update": InvalidationPlan(lists=_DMR_FAMILY, details=_DMR_FAMILY),
    "imprest_dmr.delete": InvalidationPlan(lists=_DMR_FAMILY, details=_DMR_FAMILY),
}


def plan_for(write_operation: str) -> InvalidationPlan:
    """
    Look up the fan-out of a write operation.

    Raises:
        KeyError: If the write has not declared its invalidation plan
    """
    try:
        return WRITE_INVALIDATIONS[write_operation]
    except KeyError:
        raise KeyError(
            f"No invalidation plan declared for write '{write_operation}'"
        ) from None
