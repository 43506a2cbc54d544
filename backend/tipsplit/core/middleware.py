"""
Request logging middleware: request id, admin flag and timing in every log line
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from tipsplit.core.logging_config import LoggingConfig
from tipsplit.services.auth_service import SESSION_FLAG

logger = LoggingConfig.get_logger(__name__)

# Polled by monitoring; logged at DEBUG only
QUIET_PATHS = frozenset({"/health", "/health/detailed", "/metrics"})


def _is_admin(request: Request) -> bool:
    # SessionMiddleware sits outside this one; without it there is no session
    if "session" not in request.scope:
        return False
    return request.session.get(SESSION_FLAG) is True


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Attach a request id to the log context and log each request once it finishes"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        path = request.url.path

        LoggingConfig.set_context(
            request_id=request_id,
            method=request.method,
            path=path,
            admin=_is_admin(request),
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                exc_info=True,
                extra={
                    "error_type": type(e).__name__,
                    "duration_ms": int((time.perf_counter() - started) * 1000),
                }
            )
            raise
        else:
            duration_ms = int((time.perf_counter() - started) * 1000)
            if path in QUIET_PATHS:
                log = logger.debug
            elif response.status_code >= 400:
                log = logger.warning
            else:
                log = logger.info
            log(
                f"{request.method} {path} -> {response.status_code}",
                extra={"status_code": response.status_code, "duration_ms": duration_ms}
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            LoggingConfig.clear_context()
