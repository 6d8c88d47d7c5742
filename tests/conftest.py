"""
Main pytest configuration for all tests.

Shared fixtures: a controllable clock, the in-memory cache store and a
CacheManager wired to it.
"""

import os
import pytest

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "DEBUG"

from procure.domain.cache.ttl_policy import TTLPolicy
from procure.infrastructure.repositories.memory_cache_store import InMemoryCacheStore
from procure.services.cache.cache_manager import CacheManager


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    """In-memory cache store driven by the fake clock."""
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def ttl_policy():
    """Default TTL policy table."""
    return TTLPolicy.default()


@pytest.fixture
def cache_manager(memory_store, ttl_policy):
    """Cache facade over the in-memory store."""
    return CacheManager(memory_store, ttl_policy=ttl_policy)


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "redis: marks tests as Redis-related")
    config.addinivalue_line("markers", "api: marks tests as HTTP API tests")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test file location."""
    for item in items:
        if "redis" in item.nodeid:
            item.add_marker(pytest.mark.redis)
        if "/api/" in item.nodeid:
            item.add_marker(pytest.mark.api)
