"""
Request context for ledger calls.

Each request gets a correlation id (X-Request-ID, generated when absent)
and a caller name (X-Caller-ID, one of KNOWN_CALLERS or "unknown"). Both
are stored on request.state and bound into the structlog context for the
duration of the request.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from depot.backend.core.logging import get_logger
from depot.backend.core.utils import utc_now

logger = get_logger(__name__)

KNOWN_CALLERS = frozenset({"worker", "monitoring", "purge", "cli", "api", "internal"})


def _caller(request: Request) -> str:
    caller = request.headers.get("X-Caller-ID", "").lower()
    return caller if caller in KNOWN_CALLERS else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach request id, caller and timing to every request and its logs."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        started = utc_now()

        request.state.request_id = request_id
        request.state.caller = _caller(request)
        request.state.start_time = started

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            caller=request.state.caller,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("Request crashed", extra={"error_type": type(exc).__name__})
            raise
        finally:
            elapsed_ms = int((utc_now() - started).total_seconds() * 1000)
            structlog.contextvars.clear_contextvars()

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms}ms"
        logger.debug(
            "Request handled",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
        )
        return response
