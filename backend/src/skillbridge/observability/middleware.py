"""HTTP middleware for request correlation and access logging.

Each call gets a request id (see ``request_id``). When the call finishes, one
completion line is logged carrying the caller's tenant and user as resolved by
the access pipeline (anonymous calls log neither), and the per-route request
counters are updated.
"""

import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_config import get_logger
from .metrics import http_request_duration_seconds, http_requests_total
from .request_id import REQUEST_ID_HEADER, bind_request_id, request_id_from_header, reset_request_id

logger = get_logger(__name__)


def route_template(request: Request) -> str:
    """Matched route path (``/tenants/{tenant_id}/users``), or "unmatched".

    Raw paths carry tenant and record ids and would explode metric label
    cardinality.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


def caller_context(request: Request) -> dict:
    """Tenant, user and tenant type of the principal the pipeline admitted."""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        return {}
    return {
        "tenant_id": principal.tenant_id,
        "user_id": principal.user_id,
        "tenant_type": principal.tenant_type.value,
    }


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id, log completion with caller context, count the call."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request_id_from_header(request.headers.get(REQUEST_ID_HEADER))
        token = bind_request_id(request_id)
        start_time = time.perf_counter()
        status_code: Optional[int] = None

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as e:
            status_code = 500
            logger.error(
                f"{request.method} {request.url.path} failed: {e}",
                extra={"error_type": type(e).__name__, **caller_context(request)},
                exc_info=True,
            )
            raise
        finally:
            duration = time.perf_counter() - start_time
            route = route_template(request)
            http_requests_total.labels(method=request.method, route=route, status_code=str(status_code)).inc()
            http_request_duration_seconds.labels(method=request.method, route=route).observe(duration)
            logger.info(
                f"{request.method} {request.url.path} -> {status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "route": route,
                    "status_code": status_code,
                    "duration_ms": round(duration * 1000, 2),
                    **caller_context(request),
                },
            )
            reset_request_id(token)
