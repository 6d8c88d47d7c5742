"""
Redis Infrastructure Module

Connection pooling, circuit breaker protection and exception hierarchy
for the shared cache store.
"""

from .connection_factory import RedisConnectionFactory
from .circuit_breaker import (
    RedisCircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
    CircuitBreakerMetrics,
)
from .exceptions import (
    RedisException,
    RedisConnectionException,
    RedisOperationTimeoutException,
    RedisCircuitBreakerOpenException,
    RedisConfigurationException,
)

__all__ = [
    "RedisConnectionFactory",
    "RedisCircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    "CircuitBreakerMetrics",
    "RedisException",
    "RedisConnectionException",
    "RedisOperationTimeoutException",
    "RedisCircuitBreakerOpenException",
    "RedisConfigurationException",
]
