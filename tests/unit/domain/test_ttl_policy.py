"""
Unit tests for the cache TTL policy table.
"""

import pytest

from procure.core.config import Settings
from procure.domain.cache.ttl_policy import TTLPolicy, UnknownTTLClassError
from procure.domain.cache.value_objects import TTL, TTLClass


class TestTTLPolicy:
    """Test TTLPolicy lookups."""

    def test_default_durations(self):
        """Test built-in durations of each cache class."""
        policy = TTLPolicy.default()
        assert policy.ttl_seconds(TTLClass.STATIC) == 86400
        assert policy.ttl_seconds(TTLClass.MASTER_DATA) == 600
        assert policy.ttl_seconds(TTLClass.TRANSACTIONAL) == 300
        assert policy.ttl_seconds(TTLClass.DASHBOARD) == 300
        assert policy.ttl_seconds(TTLClass.PROJECT) == 1800

    def test_class_ordering(self):
        """Test reference data outlives master data, which outlives transactions."""
        policy = TTLPolicy.default()
        assert (
            policy.ttl_seconds("STATIC")
            > policy.ttl_seconds("MASTER_DATA")
            > policy.ttl_seconds("TRANSACTIONAL")
        )

    def test_lookup_by_name(self):
        """Test classes may be named by string."""
        policy = TTLPolicy.default()
        assert policy.resolve("MASTER_DATA") == TTL(600)

    def test_unknown_class(self):
        """Test unknown classes raise instead of guessing a TTL."""
        policy = TTLPolicy.default()
        with pytest.raises(UnknownTTLClassError) as exc_info:
            policy.resolve("MASTERDATA")
        assert exc_info.value.class_name == "MASTERDATA"
        assert "MASTER_DATA" in str(exc_info.value)

    def test_unknown_class_is_value_error(self):
        """Test unknown classes can be caught as ValueError."""
        with pytest.raises(ValueError):
            TTLPolicy.default().ttl_seconds("FOREVER")

    def test_resolve_literal_seconds(self):
        """Test literal TTLs bypass the table."""
        policy = TTLPolicy.default()
        assert policy.resolve(42) == TTL(42)
        assert policy.resolve(TTL(7)) == TTL(7)

    @pytest.mark.parametrize("ttl", [0, -5, True, None, 1.5])
    def test_resolve_rejects_invalid_literals(self, ttl):
        """Test non-positive and non-integer TTLs are rejected."""
        with pytest.raises(ValueError):
            TTLPolicy.default().resolve(ttl)

    def test_missing_class_in_table(self):
        """Test a table must cover every cache class."""
        with pytest.raises(UnknownTTLClassError):
            TTLPolicy({TTLClass.STATIC: 10})

    def test_validate_classes(self):
        """Test bulk validation used by handlers at startup."""
        policy = TTLPolicy.default()
        policy.validate_classes([TTLClass.STATIC, "DASHBOARD"])
        with pytest.raises(UnknownTTLClassError):
            policy.validate_classes(["STATIC", "WEEKLY"])

    def test_from_settings(self):
        """Test the table is configurable through settings."""
        settings = Settings(CACHE_TTL_MASTER_DATA=900, CACHE_TTL_STATIC=3600)
        policy = TTLPolicy.from_settings(settings)
        assert policy.ttl_seconds(TTLClass.MASTER_DATA) == 900
        assert policy.ttl_seconds(TTLClass.STATIC) == 3600
        assert policy.as_dict()["TRANSACTIONAL"] == 300
