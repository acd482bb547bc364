# app/middleware/observability.py
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import set_request_context
from app.core.metrics import LATENCY, REQUESTS

log = logging.getLogger("http")

REQUEST_ID_HEADER = "X-Request-ID"


def _path_template(request: Request) -> str:
    # /videos/{video_id} em vez do path concreto (cardinalidade)
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Request id, métricas HTTP e log de acesso por requisição."""

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        set_request_context(rid)
        start = time.perf_counter()
        status = 500

        try:
            response: Response = await call_next(request)
            status = response.status_code
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            elapsed = time.perf_counter() - start
            method = request.method
            path_tmpl = _path_template(request)  # só existe após o roteamento

            REQUESTS.labels(path=path_tmpl, method=method, status=str(status)).inc()
            LATENCY.labels(path=path_tmpl, method=method).observe(elapsed)

            log.log(
                logging.WARNING if status >= 500 else logging.INFO,
                "%s %s -> %s in %.1fms", method, path_tmpl, status, elapsed * 1000.0,
                extra={
                    "path": path_tmpl,
                    "method": method,
                    "status": status,
                    "duration_ms": round(elapsed * 1000.0, 1),
                },
            )
