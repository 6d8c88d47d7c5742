"""
Procure Cache - Main FastAPI Application

Wires the read-through cache facade into the application lifecycle:
settings, Redis connection factory, cache store, TTL policy and the
CacheManager handed to domain handlers through ``app.state``.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

import structlog
from fastapi import FastAPI

from .core.config import Settings, get_settings
from .constants import APP_NAME
from .domain.cache.repository_interfaces import CacheStore
from .domain.cache.ttl_policy import TTLPolicy
from .infrastructure.redis.connection_factory import RedisConnectionFactory
from .infrastructure.redis.exceptions import RedisException
from .infrastructure.repositories.memory_cache_store import InMemoryCacheStore
from .infrastructure.repositories.redis_cache_store import RedisCacheStore
from .services.cache.cache_manager import CacheManager
from .api.endpoints.health import router as health_router


def configure_logging(settings: Settings) -> None:
    """Route stdlib and structlog output through one JSON pipeline."""
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Configure structured logging
settings = get_settings()
configure_logging(settings)
logger = structlog.get_logger()


async def build_cache_store(settings: Settings) -> CacheStore:
    """
    Build the configured cache store.

    A Redis outage at startup is logged and tolerated: the circuit breaker
    keeps requests on the fail-open path until the store comes back.
    """
    if settings.CACHE_BACKEND == "memory":
        logger.info("Using in-memory cache store")
        return InMemoryCacheStore()

    factory = RedisConnectionFactory(settings)
    try:
        await factory.initialize()
    except RedisException as e:
        logger.warning(
            "Redis unavailable at startup, continuing with cache misses",
            error=str(e),
            error_code=e.error_code,
        )
    return RedisCacheStore(factory)


# Application lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Procure Cache API", environment=settings.ENVIRONMENT)

    store = await build_cache_store(settings)
    ttl_policy = TTLPolicy.from_settings(settings)
    app.state.cache_manager = CacheManager(
        store, ttl_policy=ttl_policy, enabled=settings.CACHE_ENABLED
    )

    logger.info(
        "Cache facade ready",
        backend=settings.CACHE_BACKEND,
        enabled=settings.CACHE_ENABLED,
        ttl_policy=ttl_policy.as_dict(),
    )

    yield

    # Shutdown
    logger.info("Shutting down Procure Cache API")
    try:
        await app.state.cache_manager.close()
        logger.info("Application shutdown completed")
    except Exception as e:
        logger.error("Error during application shutdown", error=str(e))


# Create FastAPI application
app = FastAPI(
    title=APP_NAME,
    description="Read-through cache layer for the procurement API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Include API routers
app.include_router(health_router, tags=["health"])

# Application state
app.state.startup_time = datetime.utcnow()
