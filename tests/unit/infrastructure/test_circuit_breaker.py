"""
Unit tests for the Redis circuit breaker.
"""

import asyncio

import pytest

from procure.infrastructure.redis.circuit_breaker import (
    CircuitBreakerConfig,
    CircuitState,
    RedisCircuitBreaker,
)
from procure.infrastructure.redis.exceptions import RedisCircuitBreakerOpenException


class TestRedisCircuitBreaker:
    """Test RedisCircuitBreaker state machine."""

    @pytest.fixture
    def breaker(self, clock):
        """Circuit breaker with a low threshold and a fake clock."""
        return RedisCircuitBreaker(
            CircuitBreakerConfig(
                failure_threshold=2, recovery_timeout=10.0, operation_timeout=0.05
            ),
            clock=clock,
        )

    @staticmethod
    async def failing():
        raise ConnectionError("connection refused")

    @staticmethod
    async def succeeding():
        return "ok"

    @pytest.mark.asyncio
    async def test_success_passes_through(self, breaker):
        """Test successful calls return their result."""
        assert await breaker.call(self.succeeding) == "ok"
        assert breaker.state == CircuitState.CLOSED
        assert breaker.metrics.successful_calls == 1

    @pytest.mark.asyncio
    async def test_opens_after_threshold(self, breaker):
        """Test the circuit opens after consecutive failures."""
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(self.failing)

        assert breaker.state == CircuitState.OPEN
        assert breaker.metrics.circuit_opens == 1

    @pytest.mark.asyncio
    async def test_open_circuit_rejects_without_calling(self, breaker):
        """Test an open circuit fails immediately."""
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(self.failing)

        calls = []

        async def tracked():
            calls.append(1)
            return "ok"

        with pytest.raises(RedisCircuitBreakerOpenException):
            await breaker.call(tracked)
        assert calls == []
        assert breaker.metrics.rejected_calls == 1

    @pytest.mark.asyncio
    async def test_half_open_trial_call_closes_circuit(self, breaker, clock):
        """Test recovery after the recovery timeout."""
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(self.failing)

        clock.advance(10.0)
        assert await breaker.call(self.succeeding) == "ok"
        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_half_open_failure_reopens(self, breaker, clock):
        """Test a failed trial call reopens the circuit."""
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(self.failing)

        clock.advance(10.0)
        with pytest.raises(ConnectionError):
            await breaker.call(self.failing)
        assert breaker.state == CircuitState.OPEN
        assert breaker.metrics.circuit_opens == 2

    @pytest.mark.asyncio
    async def test_timeout_counts_as_failure(self, breaker):
        """Test slow calls are cut off and counted."""

        async def slow():
            await asyncio.sleep(1)

        with pytest.raises(asyncio.TimeoutError):
            await breaker.call(slow)
        assert breaker.metrics.timeout_calls == 1
        assert breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_non_failure_exception_ignored(self, breaker):
        """Test unrelated errors do not trip the circuit."""

        async def broken():
            raise KeyError("bug")

        for _ in range(3):
            with pytest.raises(KeyError):
                await breaker.call(broken)
        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_success_resets_failure_count(self, breaker):
        """Test only consecutive failures open the circuit."""
        with pytest.raises(ConnectionError):
            await breaker.call(self.failing)
        await breaker.call(self.succeeding)
        with pytest.raises(ConnectionError):
            await breaker.call(self.failing)
        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_reset(self, breaker):
        """Test manual reset."""
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(self.failing)

        await breaker.reset()
        status = breaker.get_status()
        assert status["state"] == "closed"
        assert status["failure_count"] == 0
