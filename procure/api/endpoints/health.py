"""
Health check endpoints for the Procure Cache service.

The cache is an accelerator, so its state is reported here but never turns
a health check into a server error.
"""

from datetime import datetime
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends

from ...core.config import get_settings
from ...services.cache.cache_manager import CacheManager
from ..dependencies import get_cache_manager

logger = structlog.get_logger()
router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check() -> Dict[str, Any]:
    """
    Basic liveness check.

    Returns a simple health status for load balancers and monitoring systems.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": settings.OTEL_SERVICE_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/cache")
async def cache_health_check(
    cache: Optional[CacheManager] = Depends(get_cache_manager),
) -> Dict[str, Any]:
    """
    Cache store health.

    Reports store reachability, circuit breaker state and facade metrics.
    """
    if cache is None:
        return {
            "status": "unavailable",
            "timestamp": datetime.utcnow().isoformat(),
            "message": "Cache facade not initialized",
        }

    try:
        result = await cache.health_check()
    except Exception as e:
        logger.error("Cache health check failed", error=str(e))
        return {
            "status": "unhealthy",
            "timestamp": datetime.utcnow().isoformat(),
            "error": str(e),
        }

    if result["status"] not in ("healthy", "disabled"):
        logger.warning("Cache store is not healthy", status=result["status"])
    return result
