"""
Redis Connection Factory

Connection management for the shared cache store.
Provides connection pooling and circuit breaker protection.
"""

import asyncio
import logging
from typing import Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    AuthenticationError as RedisAuthError,
    TimeoutError as RedisTimeoutError,
)

from opentelemetry.instrumentation.redis import RedisInstrumentor

from ...core.config import Settings
from .exceptions import RedisConnectionException, RedisConfigurationException
from .circuit_breaker import RedisCircuitBreaker, CircuitBreakerConfig

logger = logging.getLogger(__name__)

_instrumented = False


def _instrument_redis() -> None:
    """Enable OpenTelemetry Redis instrumentation once per process."""
    global _instrumented
    if _instrumented:
        return
    try:
        RedisInstrumentor().instrument()
        _instrumented = True
        logger.info("Redis OpenTelemetry instrumentation enabled")
    except Exception as e:
        logger.warning(f"Failed to enable Redis OpenTelemetry instrumentation: {e}")


class RedisConnectionFactory:
    """
    Factory for the process-wide Redis connection pool.

    One factory is built at startup and handed to the cache store; it is
    never a module-level global so tests can substitute it.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._pool: Optional[ConnectionPool] = None
        self.circuit_breaker = RedisCircuitBreaker(
            CircuitBreakerConfig(
                failure_threshold=settings.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
                recovery_timeout=settings.CIRCUIT_BREAKER_RECOVERY_TIMEOUT,
                operation_timeout=settings.CACHE_OPERATION_TIMEOUT,
                failure_exceptions=(
                    RedisConnectionError,
                    RedisAuthError,
                    RedisTimeoutError,
                    ConnectionError,
                    OSError,
                ),
            )
        )
        self._initialized = False
        self._lock = asyncio.Lock()

        _instrument_redis()

    def _build_pool(self) -> ConnectionPool:
        try:
            return ConnectionPool.from_url(
                self.settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=self.settings.REDIS_CONNECT_TIMEOUT,
                socket_timeout=self.settings.CACHE_SCAN_TIMEOUT,
                max_connections=self.settings.REDIS_MAX_CONNECTIONS,
            )
        except ValueError as e:
            raise RedisConfigurationException(
                message=f"Invalid Redis URL: {e}",
                config_key="REDIS_URL",
                original_error=e,
            )

    async def initialize(self) -> None:
        """
        Create the pool and verify connectivity.

        Raises:
            RedisConnectionException: If the store cannot be reached
        """
        if self._initialized:
            return

        async with self._lock:
            if self._initialized:
                return

            if self._pool is None:
                self._pool = self._build_pool()
            self._initialized = True

        try:
            await asyncio.wait_for(
                self.client().ping(), timeout=self.settings.REDIS_CONNECT_TIMEOUT * 2
            )
            logger.info(
                "Redis connection factory initialized",
                extra={"max_connections": self.settings.REDIS_MAX_CONNECTIONS},
            )
        except (asyncio.TimeoutError, RedisConnectionError, RedisTimeoutError, OSError) as e:
            raise RedisConnectionException(
                message="Redis connection test failed", original_error=e
            )

    def client(self) -> Redis:
        """Return a client bound to the shared pool."""
        if self._pool is None:
            self._pool = self._build_pool()
        return Redis(connection_pool=self._pool)

    async def close(self) -> None:
        """Disconnect every pooled connection."""
        async with self._lock:
            if self._pool is not None:
                await self._pool.disconnect()
                self._pool = None
            self._initialized = False
            logger.info("Redis connection factory closed")
