"""
Unit tests for the in-memory cache store.
"""

import pytest

from procure.domain.cache.value_objects import TTL
from procure.infrastructure.repositories.memory_cache_store import InMemoryCacheStore


class TestInMemoryCacheStore:
    """Test InMemoryCacheStore semantics."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, memory_store):
        """Test stored payloads are returned unchanged."""
        await memory_store.set("vendor:v1", '{"id":"v1"}', TTL(60))
        assert await memory_store.get("vendor:v1") == '{"id":"v1"}'

    @pytest.mark.asyncio
    async def test_get_absent(self, memory_store):
        """Test absent keys read as None."""
        assert await memory_store.get("vendor:missing") is None

    @pytest.mark.asyncio
    async def test_last_write_wins(self, memory_store):
        """Test set overwrites existing entries."""
        await memory_store.set("vendor:v1", "1", TTL(60))
        await memory_store.set("vendor:v1", "2", TTL(60))
        assert await memory_store.get("vendor:v1") == "2"

    @pytest.mark.asyncio
    async def test_expiry_boundary(self, memory_store, clock):
        """Test entries live until, and not past, their TTL."""
        await memory_store.set("geo:countries:{}", "[]", TTL(300))

        clock.advance(299.9)
        assert await memory_store.get("geo:countries:{}") == "[]"

        clock.advance(0.2)
        assert await memory_store.get("geo:countries:{}") is None

    @pytest.mark.asyncio
    async def test_overwrite_resets_expiry(self, memory_store, clock):
        """Test a fresh set restarts the TTL."""
        await memory_store.set("vendor:v1", "1", TTL(10))
        clock.advance(8)
        await memory_store.set("vendor:v1", "2", TTL(10))
        clock.advance(8)
        assert await memory_store.get("vendor:v1") == "2"
        assert memory_store.ttl("vendor:v1") == pytest.approx(2)

    @pytest.mark.asyncio
    async def test_delete_idempotent(self, memory_store):
        """Test deleting absent keys is not an error."""
        await memory_store.set("vendor:v1", "1", TTL(60))
        assert await memory_store.delete("vendor:v1", "vendor:v2") == 1
        assert await memory_store.delete("vendor:v1") == 0
        assert await memory_store.delete() == 0

    @pytest.mark.asyncio
    async def test_delete_expired_counts_as_absent(self, memory_store, clock):
        """Test expired entries are not reported as removed."""
        await memory_store.set("vendor:v1", "1", TTL(5))
        clock.advance(5)
        assert await memory_store.delete("vendor:v1") == 0

    @pytest.mark.asyncio
    async def test_scan_batches(self, memory_store, clock):
        """Test prefix scans are literal and skip expired entries."""
        await memory_store.set("vendor:v1", "1", TTL(60))
        await memory_store.set("vendor:getList:{}", "[]", TTL(5))
        await memory_store.set("vendors:v1", "1", TTL(60))
        await memory_store.set("item:i1", "1", TTL(60))

        pages = [page async for page in memory_store.scan_batches("vendor:")]
        assert sorted(key for page in pages for key in page) == [
            "vendor:getList:{}",
            "vendor:v1",
        ]

        clock.advance(5)
        pages = [page async for page in memory_store.scan_batches("vendor:")]
        assert pages == [["vendor:v1"]]

    @pytest.mark.asyncio
    async def test_scan_batches_pages(self, clock):
        """Test matches are served in pages of at most batch_size keys."""
        store = InMemoryCacheStore(clock=clock, batch_size=2)
        for n in range(5):
            await store.set(f"vendor:v{n}", "1", TTL(60))

        pages = [page async for page in store.scan_batches("vendor:")]

        assert [len(page) for page in pages] == [2, 2, 1]

    @pytest.mark.asyncio
    async def test_scan_batches_nothing_matched(self, memory_store):
        """Test an empty prefix match yields no pages."""
        assert [page async for page in memory_store.scan_batches("vendor:")] == []

    @pytest.mark.asyncio
    async def test_len_and_status(self, memory_store, clock):
        """Test live entry accounting."""
        await memory_store.set("vendor:v1", "1", TTL(60))
        await memory_store.set("vendor:v2", "1", TTL(1))
        clock.advance(1)

        assert len(memory_store) == 1
        assert memory_store.get_status() == {"backend": "memory", "entries": 1}
        assert memory_store.ttl("vendor:v2") is None

    @pytest.mark.asyncio
    async def test_ping_and_close(self, memory_store):
        """Test lifecycle operations."""
        await memory_store.set("vendor:v1", "1", TTL(60))
        assert await memory_store.ping() is True
        await memory_store.close()
        assert len(memory_store) == 0
