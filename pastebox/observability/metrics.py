# pastebox/observability/metrics.py
# minimal prometheus instrumentation

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest


PASTES_CREATED = Counter(
    "pastes_created_total",
    "Pastes created",
    labelnames=("visibility",),
)
PASTES_DELETED = Counter(
    "pastes_deleted_total",
    "Pastes deleted by their owner",
)
RATE_LIMIT_REJECTIONS = Counter(
    "rate_limit_rejections_total",
    "Paste creations rejected by the rate limiter",
)
STORE_ERRORS = Counter(
    "store_errors_total",
    "Failed or timed out store calls",
    labelnames=("operation",),
)


router = APIRouter(tags=["Metrics"])


@router.get("/metrics", include_in_schema=False)
async def prometheus_metrics() -> Response:
    """// expose /metrics"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
