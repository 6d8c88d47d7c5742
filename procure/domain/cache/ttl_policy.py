"""
Cache TTL Policy

Static lookup from semantic cache class to time-to-live. Handlers name a
class instead of hardcoding seconds; unknown classes fail at the point of
misuse and never fall back to a guessed TTL.
"""

from typing import Dict, Iterable, Mapping, Union

from .value_objects import TTL, TTLClass

TTLSpec = Union[TTLClass, str, int, TTL]

DEFAULT_TTL_SECONDS: Dict[TTLClass, int] = {
    TTLClass.TRANSACTIONAL: 300,  # 5 minutes
    TTLClass.MASTER_DATA: 600,  # 10 minutes
    TTLClass.DASHBOARD: 300,  # 5 minutes
    TTLClass.PROJECT: 1800,  # 30 minutes
    TTLClass.STATIC: 86400,  # 24 hours
}


class UnknownTTLClassError(ValueError):
    """Raised when a cache class name is not in the TTL policy table."""

    def __init__(self, class_name: object, message: str = ""):
        self.class_name = class_name
        if not message:
            known = ", ".join(member.value for member in TTLClass)
            message = f"Unknown cache TTL class: {class_name!r} (known: {known})"
        super().__init__(message)


def _coerce_class(name: object) -> TTLClass:
    if isinstance(name, TTLClass):
        return name
    if isinstance(name, str):
        try:
            return TTLClass(name)
        except ValueError:
            raise UnknownTTLClassError(name) from None
    raise UnknownTTLClassError(name)


class TTLPolicy:
    """TTL policy table keyed by cache class."""

    def __init__(self, table: Mapping[Union[TTLClass, str], int]):
        resolved: Dict[TTLClass, TTL] = {}
        for name, seconds in table.items():
            resolved[_coerce_class(name)] = TTL(seconds)

        missing = [member.value for member in TTLClass if member not in resolved]
        if missing:
            raise UnknownTTLClassError(
                missing[0], f"TTL policy is missing classes: {', '.join(missing)}"
            )

        self._table = resolved

    @classmethod
    def default(cls) -> "TTLPolicy":
        """Policy with the built-in durations."""
        return cls(DEFAULT_TTL_SECONDS)

    @classmethod
    def from_settings(cls, settings) -> "TTLPolicy":
        """Build the policy from ``CACHE_TTL_*`` settings."""
        return cls(settings.cache_ttl_table)

    def ttl_seconds(self, class_name: Union[TTLClass, str]) -> int:
        """Look up the duration of a cache class."""
        return self._table[_coerce_class(class_name)].seconds

    def resolve(self, ttl: TTLSpec) -> TTL:
        """Resolve a class, class name, TTL or literal seconds to a TTL."""
        if isinstance(ttl, TTL):
            return ttl
        if isinstance(ttl, bool):
            raise ValueError("TTL must be a cache class or a positive integer")
        if isinstance(ttl, int):
            return TTL(ttl)
        return self._table[_coerce_class(ttl)]

    def validate_classes(self, names: Iterable[Union[TTLClass, str]]) -> None:
        """Fail fast if any of ``names`` is not a known cache class."""
        for name in names:
            _coerce_class(name)

    def as_dict(self) -> Dict[str, int]:
        return {member.value: ttl.seconds for member, ttl in self._table.items()}
