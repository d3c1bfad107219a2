"""Request context middleware — request id and access log.

Learn: Every request gets an id, either from the incoming X-Request-ID
header (for distributed tracing) or auto-generated. The id is bound to
structlog's contextvars so it appears in every log entry for that
request, returned in the response header (500s included), and logged
once more with the status and duration when the request finishes.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id for logging and emit one access-log line."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception:
            # The 500 itself is rendered by the outermost error handler.
            logger.exception(
                "http.request",
                method=request.method,
                path=request.url.path,
                status=500,
                duration_ms=_elapsed_ms(started),
            )
            raise
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "http.request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
