# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Liveness, readiness and Prometheus scrape endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from selection_service.core.config import settings
from selection_service.core.dependencies import get_directory_repo, get_history_repo

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    """Liveness probe for Docker and orchestration."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage": "sql" if settings.DATABASE_URL else "memory",
    }


@router.get("/health/ready")
def readiness_check():
    """Ready once both stores answer a count query."""
    try:
        members = get_directory_repo().count()
        history_records = get_history_repo().count()
    except Exception as exc:
        raise HTTPException(status_code=503, detail=f"Storage unavailable: {exc}")
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "directory_members": members,
        "history_records": history_records,
    }


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
