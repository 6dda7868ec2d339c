# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP middleware: X-Request-ID propagation and per-endpoint request metrics.
"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from selection_service.core.logging import get_logger
from selection_service.metrics.prometheus import HTTP_ERRORS, REQUEST_COUNT, REQUEST_LATENCY

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Path segments kept verbatim in metric labels; anything else is an ID
ROUTE_SEGMENTS: frozenset[str] = frozenset({
    "api", "v1", "selection-processes", "compute-order", "stables",
    "members", "validate", "selection-history", "latest", "health",
    "metrics", "ready",
})

# Probe and docs traffic is not counted
UNTRACKED_PATHS: frozenset[str] = frozenset({
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
})


def endpoint_label(path: str) -> str:
    """'/api/v1/stables/abc/members/validate' -> '/api/v1/stables/{id}/members/validate'."""
    segments = [s for s in path.split("/") if s]
    if not segments:
        return "/"
    return "/" + "/".join(s if s in ROUTE_SEGMENTS else "{id}" for s in segments)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's request ID or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count requests and errors and observe latency per endpoint label."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        if request.url.path in UNTRACKED_PATHS:
            return response

        endpoint = endpoint_label(request.url.path)
        status = str(response.status_code)
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(elapsed)
        if response.status_code >= 400:
            HTTP_ERRORS.labels(method=request.method, endpoint=endpoint, status=status).inc()
            logger.info(
                "Request failed: %s %s -> %s",
                request.method, endpoint, status,
                extra={"request_id": getattr(request.state, "request_id", None)},
            )
        return response
