"""
Redis Circuit Breaker Implementation

Implements circuit breaker pattern for cache store operations
so that an unreachable store is skipped instead of waited on.
"""

import time
import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar
from dataclasses import dataclass

from .exceptions import RedisCircuitBreakerOpenException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, reject calls
    HALF_OPEN = "half_open"  # Testing if service recovered


@dataclass
class CircuitBreakerConfig:
    """Configuration for circuit breaker."""

    # Failure threshold - number of failures before opening
    failure_threshold: int = 5

    # Recovery timeout - seconds to wait before trying again
    recovery_timeout: float = 30.0

    # Success threshold - number of successes needed to close circuit
    success_threshold: int = 1

    # Default timeout for individual operations
    operation_timeout: float = 0.25

    # Monitor these exception types as failures
    failure_exceptions: tuple = (
        ConnectionError,
        TimeoutError,
        OSError,
    )


@dataclass
class CircuitBreakerMetrics:
    """Metrics for circuit breaker monitoring."""

    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    timeout_calls: int = 0
    rejected_calls: int = 0
    circuit_opens: int = 0
    last_failure_time: Optional[float] = None
    last_success_time: Optional[float] = None

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        if self.total_calls == 0:
            return 0.0
        return self.successful_calls / self.total_calls

    @property
    def failure_rate(self) -> float:
        """Calculate failure rate."""
        if self.total_calls == 0:
            return 0.0
        return self.failed_calls / self.total_calls


class RedisCircuitBreaker:
    """
    Circuit breaker for cache store operations.

    Stops calling the store once the failure threshold is exceeded and
    lets a single trial call through after the recovery timeout.
    """

    def __init__(
        self,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or CircuitBreakerConfig()
        self._clock = clock
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.success_count = 0
        self.last_failure_time: Optional[float] = None
        self.last_state_change_time = self._clock()
        self.metrics = CircuitBreakerMetrics()
        self._lock = asyncio.Lock()

    async def call(
        self,
        func: Callable[[], Awaitable[T]],
        timeout: Optional[float] = None,
    ) -> T:
        """
        Execute coroutine function with circuit breaker protection.

        Args:
            func: Zero-argument coroutine function to execute
            timeout: Per-call timeout, defaults to config.operation_timeout

        Returns:
            Function result

        Raises:
            RedisCircuitBreakerOpenException: If circuit is open
            asyncio.TimeoutError: If the call exceeds the timeout
            Exception: Original exception from function call
        """
        async with self._lock:
            self.metrics.total_calls += 1
            # Check if circuit is open and should remain open
            if self.state == CircuitState.OPEN:
                if self._should_attempt_reset():
                    self._transition(CircuitState.HALF_OPEN)
                    logger.info(
                        "Circuit breaker transitioning to HALF_OPEN",
                        extra={"failure_count": self.failure_count},
                    )
                else:
                    self.metrics.rejected_calls += 1
                    raise RedisCircuitBreakerOpenException()

        call_timeout = timeout if timeout is not None else self.config.operation_timeout
        start_time = self._clock()

        try:
            result = await asyncio.wait_for(func(), timeout=call_timeout)

        except asyncio.TimeoutError:
            self.metrics.timeout_calls += 1
            await self._record_failure("timeout")

            logger.warning(
                "Circuit breaker: operation timed out",
                extra={
                    "execution_time": self._clock() - start_time,
                    "timeout": call_timeout,
                    "state": self.state.value,
                },
            )
            raise

        except Exception as e:
            # Non-failure exceptions don't affect circuit state
            if not isinstance(e, self.config.failure_exceptions):
                raise

            await self._record_failure(type(e).__name__)
            logger.warning(
                "Circuit breaker: operation failed",
                extra={
                    "exception_type": type(e).__name__,
                    "failure_count": self.failure_count,
                    "state": self.state.value,
                },
            )
            raise

        await self._record_success()
        return result

    def _transition(self, state: CircuitState) -> None:
        self.state = state
        self.last_state_change_time = self._clock()
        if state == CircuitState.OPEN:
            self.metrics.circuit_opens += 1
            self.success_count = 0

    async def _record_success(self) -> None:
        """Record successful operation."""
        async with self._lock:
            self.metrics.successful_calls += 1
            self.metrics.last_success_time = self._clock()

            if self.state == CircuitState.HALF_OPEN:
                self.success_count += 1
                if self.success_count >= self.config.success_threshold:
                    self._transition(CircuitState.CLOSED)
                    self.failure_count = 0
                    self.success_count = 0
                    logger.info("Circuit breaker: circuit closed after recovery")
            elif self.state == CircuitState.CLOSED:
                self.failure_count = 0

    async def _record_failure(self, failure_type: str) -> None:
        """Record failed operation."""
        async with self._lock:
            now = self._clock()
            self.metrics.failed_calls += 1
            self.metrics.last_failure_time = now
            self.last_failure_time = now

            if self.state == CircuitState.HALF_OPEN:
                # Immediate opening on failure in half-open state
                self._transition(CircuitState.OPEN)
                logger.warning(
                    "Circuit breaker: circuit opened again after failure in half-open state",
                    extra={"failure_type": failure_type},
                )

            elif self.state == CircuitState.CLOSED:
                self.failure_count += 1

                if self.failure_count >= self.config.failure_threshold:
                    self._transition(CircuitState.OPEN)
                    logger.warning(
                        "Circuit breaker: circuit opened due to failure threshold",
                        extra={
                            "failure_count": self.failure_count,
                            "threshold": self.config.failure_threshold,
                            "failure_type": failure_type,
                        },
                    )

    def _should_attempt_reset(self) -> bool:
        """Check if enough time has passed to attempt circuit reset."""
        if self.last_failure_time is None:
            return True

        time_since_failure = self._clock() - self.last_failure_time
        return time_since_failure >= self.config.recovery_timeout

    def get_status(self) -> dict:
        """Get current circuit breaker status for monitoring."""
        return {
            "state": self.state.value,
            "failure_count": self.failure_count,
            "last_failure_time": self.last_failure_time,
            "last_state_change_time": self.last_state_change_time,
            "metrics": {
                "total_calls": self.metrics.total_calls,
                "successful_calls": self.metrics.successful_calls,
                "failed_calls": self.metrics.failed_calls,
                "timeout_calls": self.metrics.timeout_calls,
                "rejected_calls": self.metrics.rejected_calls,
                "success_rate": self.metrics.success_rate,
                "failure_rate": self.metrics.failure_rate,
                "circuit_opens": self.metrics.circuit_opens,
            },
            "config": {
                "failure_threshold": self.config.failure_threshold,
                "recovery_timeout": self.config.recovery_timeout,
                "operation_timeout": self.config.operation_timeout,
            },
        }

    async def reset(self) -> None:
        """Manually reset circuit breaker to closed state."""
        async with self._lock:
            self._transition(CircuitState.CLOSED)
            self.failure_count = 0
            self.success_count = 0
            self.last_failure_time = None

            logger.info("Circuit breaker manually reset to CLOSED state")
