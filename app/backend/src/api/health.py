"""Health check endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..core.config import Settings, get_settings
from ..db import get_session_dependency
from ..reports import QueryProcessor
from .webhook import get_query_processor

router = APIRouter(tags=["health"])

ENDPOINTS = (
    "POST /webhook/n8n",
    "GET /api/tower-data/{farm_id}",
    "GET /api/temp-data/{table_id}",
    "GET /health/live",
    "GET /health/ready",
    "GET /metrics",
)


@router.get("/")
def service_info(
    settings: Settings = Depends(get_settings),
    processor: QueryProcessor = Depends(get_query_processor),
) -> dict[str, Any]:
    """Describe the running service and the report modules it loaded."""

    registry = processor.registry
    return {
        "status": "Report dispatcher is running",
        "service": settings.service_name,
        "version": settings.service_version,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": {"configured": settings.database_configured},
        "modules": [module.describe() for module in registry],
        "rejectedModules": [
            {"module": exc.module_key, "missing": exc.missing} for exc in registry.rejected
        ],
        "fallbackModule": processor.fallback_module,
        "endpoints": list(ENDPOINTS),
    }


@router.get("/health/live")
def liveness() -> dict[str, str]:
    """Return a liveness indicator."""

    return {"status": "live"}


@router.get("/health/ready")
def readiness(session: Session = Depends(get_session_dependency)) -> dict[str, str]:
    """Return readiness information, ensuring the database connection is healthy."""

    session.execute(text("SELECT 1"))
    return {"status": "ready"}


@router.get("/metrics")
def metrics() -> Response:
    """Expose Prometheus metrics."""

    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
