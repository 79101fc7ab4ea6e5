"""
HTTP middleware — request logging, correlation IDs, timing and metrics.

Every request is logged once it completes: info on success, error otherwise,
with method, path, client address, status and elapsed time.
"""

from __future__ import annotations

import time
import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response

from ethnode_api.ethnode_logging import get_logger
from ethnode_api.telemetry.metrics import REQUEST_COUNT, REQUEST_DURATION

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _route_path(request: Request) -> str:
    # Route template keeps metric label cardinality bounded (no raw addresses).
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


def _client_addr(request: Request) -> str:
    if request.client is None:
        return "unknown"
    return f"{request.client.host}:{request.client.port}"


async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    structlog.contextvars.bind_contextvars(request_id=request_id)
    start = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        elapsed = time.perf_counter() - start
        path = _route_path(request)
        REQUEST_COUNT.labels(method=request.method, path=path, status=str(status)).inc()
        REQUEST_DURATION.labels(method=request.method, path=path).observe(elapsed)
        fields = {
            "method": request.method,
            "path": request.url.path,
            "client": _client_addr(request),
            "status": status,
            "elapsed_ms": round(elapsed * 1000, 2),
        }
        if status < 400:
            logger.info("request_completed", **fields)
        else:
            logger.error("request_failed", **fields)
        structlog.contextvars.unbind_contextvars("request_id")
