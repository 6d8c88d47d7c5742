"""
Redis Cache Store Implementation

Infrastructure implementation of the CacheStore interface using Redis.
Maps store operations onto GET / SET EX / UNLINK / SCAN MATCH.
"""

import asyncio
import logging
import re
import time
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, TypeVar

from redis.asyncio import Redis
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
    TimeoutError as RedisTimeoutError,
    RedisError,
)

from ...domain.cache.repository_interfaces import CacheStore
from ...domain.cache.value_objects import TTL
from ..redis.circuit_breaker import RedisCircuitBreaker
from ..redis.connection_factory import RedisConnectionFactory
from ..redis.exceptions import (
    RedisException,
    RedisConnectionException,
    RedisOperationTimeoutException,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def escape_glob(prefix: str) -> str:
    """Escape Redis MATCH glob metacharacters in a literal prefix."""
    return _GLOB_SPECIAL.sub(r"\\\1", prefix)


class RedisCacheStore(CacheStore):
    """Redis implementation of the cache store."""

    def __init__(
        self,
        factory: RedisConnectionFactory,
        operation_timeout: Optional[float] = None,
        scan_timeout: Optional[float] = None,
        scan_batch_size: Optional[int] = None,
    ):
        settings = factory.settings
        self.factory = factory
        self.operation_timeout = operation_timeout or settings.CACHE_OPERATION_TIMEOUT
        self.scan_timeout = scan_timeout or settings.CACHE_SCAN_TIMEOUT
        self.scan_batch_size = scan_batch_size or settings.CACHE_SCAN_BATCH_SIZE

    @property
    def circuit_breaker(self) -> RedisCircuitBreaker:
        return self.factory.circuit_breaker

    async def _execute(
        self,
        operation: str,
        func: Callable[[Redis], Awaitable[T]],
        timeout: float,
        key: Optional[str] = None,
    ) -> T:
        """Run one store call through the circuit breaker with a timeout."""
        client = self.factory.client()
        try:
            return await self.circuit_breaker.call(lambda: func(client), timeout=timeout)

        except RedisException:
            raise

        except asyncio.TimeoutError as e:
            raise RedisOperationTimeoutException(
                operation=operation, timeout_seconds=timeout, key=key, original_error=e
            )

        except RedisTimeoutError as e:
            raise RedisOperationTimeoutException(
                operation=operation, timeout_seconds=timeout, key=key, original_error=e
            )

        except (RedisConnectionError, OSError) as e:
            raise RedisConnectionException(
                message=f"Redis {operation} failed: {e}", original_error=e
            )

        except RedisError as e:
            raise RedisException(
                message=f"Redis {operation} failed: {e}",
                details={"operation": operation, "key": key} if key else None,
                original_error=e,
            )

    async def get(self, key: str) -> Optional[str]:
        return await self._execute(
            "get", lambda client: client.get(key), self.operation_timeout, key
        )

    async def set(self, key: str, value: str, ttl: TTL) -> None:
        await self._execute(
            "set",
            lambda client: client.set(key, value, ex=ttl.seconds),
            self.operation_timeout,
            key,
        )

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0

        removed = 0
        # Batch deletes so one UNLINK never carries an unbounded argument list
        for start in range(0, len(keys), self.scan_batch_size):
            batch = keys[start : start + self.scan_batch_size]
            removed += await self._execute(
                "delete",
                lambda client, batch=batch: client.unlink(*batch),
                self.operation_timeout,
                batch[0] if len(batch) == 1 else None,
            )
        return removed

    async def scan_batches(self, prefix: str) -> AsyncIterator[List[str]]:
        pattern = f"{escape_glob(prefix)}*"
        # One budget covers the whole enumeration, including the caller's
        # work between pages; each SCAN round trip keeps the operation timeout
        deadline = time.monotonic() + self.scan_timeout
        cursor = 0
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise RedisOperationTimeoutException(
                    operation="scan", timeout_seconds=self.scan_timeout
                )

            # SCAN instead of KEYS so Redis is never blocked on a large keyspace
            cursor, keys = await self._execute(
                "scan",
                lambda client, cursor=cursor: client.scan(
                    cursor=cursor, match=pattern, count=self.scan_batch_size
                ),
                min(self.operation_timeout, remaining),
            )
            if keys:
                yield list(keys)
            if int(cursor) == 0:
                return

    async def ping(self) -> bool:
        return bool(
            await self._execute("ping", lambda client: client.ping(), self.operation_timeout)
        )

    async def close(self) -> None:
        await self.factory.close()

    def get_status(self) -> Dict[str, Any]:
        return {
            "backend": "redis",
            "operation_timeout": self.operation_timeout,
            "scan_timeout": self.scan_timeout,
            "circuit_breaker": self.circuit_breaker.get_status(),
        }
