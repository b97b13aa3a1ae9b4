# pastebox/routers/health.py
# Health check endpoints for monitoring and load balancers
# Provides liveness and readiness probes

import time
import logging
from typing import Dict, Any

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel

from pastebox.errors import StoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


class HealthStatus(BaseModel):
    """Health check response model."""
    status: str  # "healthy", "unhealthy"
    timestamp: float
    version: str = "1.0.0"
    checks: Dict[str, Dict[str, Any]] = {}


class ComponentHealth(BaseModel):
    """Individual component health."""
    status: str
    latency_ms: float = 0.0
    message: str = ""


async def check_store_health(request: Request) -> ComponentHealth:
    """Ping the key-value store."""
    start = time.time()
    store = getattr(request.app.state, "store", None)
    if store is None:
        return ComponentHealth(status="unhealthy", message="Store not initialized")

    try:
        ok = await store.ping()
    except StoreUnavailable as e:
        logger.error(f"Store health check failed: {e.message}")
        return ComponentHealth(
            status="unhealthy",
            latency_ms=(time.time() - start) * 1000,
            message="Store unavailable",
        )

    return ComponentHealth(
        status="healthy" if ok else "unhealthy",
        latency_ms=(time.time() - start) * 1000,
        message="" if ok else "Store did not answer ping",
    )


@router.get("/health", response_model=HealthStatus)
async def health_check(request: Request, response: Response):
    """
    Full health check endpoint.
    Returns status of all components.
    """
    store_health = await check_store_health(request)
    checks = {
        "store": {
            "status": store_health.status,
            "latency_ms": round(store_health.latency_ms, 2),
            "message": store_health.message,
        }
    }

    overall_status = "healthy"
    if store_health.status == "unhealthy":
        overall_status = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthStatus(status=overall_status, timestamp=time.time(), checks=checks)


@router.get("/health/live")
async def liveness_probe():
    """
    Liveness probe.
    Returns 200 if the process is running; does NOT check the store.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_probe(request: Request, response: Response):
    """
    Readiness probe.
    Returns 200 only if the store answers.
    """
    store_health = await check_store_health(request)

    if store_health.status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "not_ready",
            "reason": store_health.message
        }

    return {"status": "ready"}
