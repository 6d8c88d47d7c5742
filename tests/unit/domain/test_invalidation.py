"""
Unit tests for write invalidation plans.
"""

import pytest

from procure.domain.procurement.entities import CacheEntity, RecordNotFoundError
from procure.domain.procurement.invalidation import (
    WRITE_INVALIDATIONS,
    InvalidationPlan,
    plan_for,
)


class TestInvalidationPlan:
    """Test InvalidationPlan value object."""

    def test_entities_deduplicated(self):
        """Test entities lists each affected entity once, in order."""
        plan = InvalidationPlan(lists=("a", "b"), details=("b", "c"))
        assert plan.entities == ("a", "b", "c")

    def test_invalid_entity_rejected(self):
        """Test plans cannot name malformed entities."""
        with pytest.raises(ValueError):
            InvalidationPlan(lists=("bad:entity",))


class TestWriteInvalidations:
    """Test the declared fan-out of every write."""

    def test_vendor_writes_touch_vendor_lists(self):
        """Test vendor writes invalidate vendor listings."""
        for operation in ("vendor.create", "vendor.update", "vendor.delete"):
            assert CacheEntity.VENDOR in plan_for(operation).lists

    @pytest.mark.parametrize(
        "operation", ["imprest_dmr.create", "imprest_dmr.update", "imprest_dmr.delete"]
    )
    def test_imprest_fans_out_to_dmr_family(self, operation):
        """Test imprest writes reach imprest, order and entry caches."""
        plan = plan_for(operation)
        for entity in (
            CacheEntity.DMR_IMPREST,
            CacheEntity.DMR_ORDER,
            CacheEntity.DMR_ENTRY,
        ):
            assert entity in plan.lists
            assert entity in plan.details

    @pytest.mark.parametrize(
        "operation", ["dmr_entry.create", "dmr_entry.update", "dmr_entry.delete"]
    )
    def test_dmr_entry_reaches_orders_and_imprest(self, operation):
        """Test DMR entry writes invalidate the orders and imprest sheets they feed."""
        plan = plan_for(operation)
        assert CacheEntity.DMR_ENTRY in plan.lists
        for entity in (CacheEntity.DMR_ORDER, CacheEntity.DMR_IMPREST):
            assert entity in plan.lists
            assert entity in plan.details

    def test_every_plan_names_an_entity(self):
        """Test no write declares an empty fan-out."""
        for operation, plan in WRITE_INVALIDATIONS.items():
            assert plan.entities, operation

    def test_undeclared_write(self):
        """Test writes without a declared plan fail loudly."""
        with pytest.raises(KeyError, match="vendor.archive"):
            plan_for("vendor.archive")


class TestRecordNotFoundError:
    """Test handler error type."""

    def test_message_and_attributes(self):
        """Test error carries entity and id."""
        error = RecordNotFoundError("vendor", "v9")
        assert error.entity == "vendor"
        assert error.record_id == "v9"
        assert "v9" in str(error)
        assert isinstance(error, LookupError)
