"""
Per-request Prometheus metrics
"""
import re
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from tipsplit.core.metrics import (http_request_duration_seconds,
                                   http_requests_total)

_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


def endpoint_label(path: str) -> str:
    """Collapse numeric ids so /api/calculations/17 aggregates as /api/calculations/{id}"""
    return _NUMERIC_SEGMENT.sub("/{id}", path)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count and time every request except scrapes of /metrics"""

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        started = time.perf_counter()
        status_code = "500"
        try:
            response = await call_next(request)
            status_code = str(response.status_code)
            return response
        finally:
            labels = {
                "method": request.method,
                "endpoint": endpoint_label(request.url.path),
                "status_code": status_code,
            }
            http_requests_total.labels(**labels).inc()
            http_request_duration_seconds.labels(**labels).observe(time.perf_counter() - started)
