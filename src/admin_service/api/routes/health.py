"""Liveness and readiness endpoints."""
import asyncio
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from fastapi import APIRouter, Response, status
from pydantic import BaseModel, Field

from admin_service.api.dependencies import AppSettings
from admin_service.infrastructure.cache.redis import get_redis_manager
from admin_service.infrastructure.database.connection import db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""
    name: str = Field(..., description="Component name")
    status: HealthStatus = Field(..., description="Component health status")
    latency_ms: Optional[float] = Field(None, description="Response latency in milliseconds")
    details: Optional[Dict] = Field(None, description="Additional component details")
    error: Optional[str] = Field(None, description="Error message if unhealthy")


class ReadinessResponse(BaseModel):
    status: HealthStatus
    version: str
    server: str
    timestamp: datetime = Field(default_factory=_now)
    components: List[ComponentHealth] = Field(default_factory=list)


async def check_database_health(timeout: float = 5.0) -> ComponentHealth:
    start_time = time.time()

    if not db.is_connected:
        return ComponentHealth(name="database", status=HealthStatus.UNHEALTHY, error="Database not configured")

    try:
        healthy = await asyncio.wait_for(db.health_check(), timeout)
    except asyncio.TimeoutError:
        return ComponentHealth(
            name="database",
            status=HealthStatus.UNHEALTHY,
            error=f"Database check timed out after {timeout}s",
        )

    return ComponentHealth(
        name="database",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
        latency_ms=round((time.time() - start_time) * 1000, 2),
    )


async def check_redis_health(timeout: float = 5.0) -> ComponentHealth:
    """Redis is optional; its absence only degrades the service."""
    start_time = time.time()
    redis_manager = await get_redis_manager()

    if not redis_manager.is_available:
        return ComponentHealth(
            name="redis",
            status=HealthStatus.DEGRADED,
            error="Redis not configured or unavailable",
        )

    try:
        healthy = await asyncio.wait_for(redis_manager.health_check(), timeout)
    except asyncio.TimeoutError:
        healthy = False

    return ComponentHealth(
        name="redis",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.DEGRADED,
        latency_ms=round((time.time() - start_time) * 1000, 2),
    )


@router.get("/live")
async def liveness() -> dict:
    return {"status": "alive", "timestamp": _now().isoformat()}


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(response: Response, settings: AppSettings) -> ReadinessResponse:
    components = list(await asyncio.gather(check_database_health(), check_redis_health()))

    overall = HealthStatus.HEALTHY
    if any(c.status == HealthStatus.UNHEALTHY for c in components):
        overall = HealthStatus.UNHEALTHY
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning(
            "Readiness check failed: %s",
            ", ".join(f"{c.name}={c.error}" for c in components if c.status == HealthStatus.UNHEALTHY),
        )
    elif any(c.status == HealthStatus.DEGRADED for c in components):
        overall = HealthStatus.DEGRADED

    return ReadinessResponse(
        status=overall,
        version=settings.app_version,
        server=settings.server_name,
        components=components,
    )
