"""Request timing, tracing and session-id middleware for the quote engine."""
import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.config import SESSION_HEADER

logger = logging.getLogger("quote-engine.middleware")

SKIP_LOG_PATHS = {"/health"}


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that:
    - Assigns a unique X-Request-ID (uuid4) to every request/response.
    - Reuses the caller's X-Session-ID, or issues one, and echoes it back.
    - Measures end-to-end request duration in milliseconds.
    - Adds X-Process-Time header to every response.
    - Emits a structured log line for every request (except /health).
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())
        session_id = request.headers.get(SESSION_HEADER) or uuid.uuid4().hex
        start_time = time.perf_counter()

        # Route handlers read these through app.api.deps
        request.state.request_id = request_id
        request.state.session_id = session_id

        response: Response = await call_next(request)

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(duration_ms)
        response.headers[SESSION_HEADER] = session_id

        if request.url.path not in SKIP_LOG_PATHS:
            logger.info(
                "request completed",
                extra={
                    "http_method": request.method,
                    "http_path": request.url.path,
                    "http_status": response.status_code,
                    "request_id": request_id,
                    "session_id": session_id,
                    "duration_ms": duration_ms,
                },
            )

        return response
