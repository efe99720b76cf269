"""
Structured JSON request logging middleware.

Every request/response cycle is logged as a single structured event
containing method, path, status code, duration, the authenticated user and a
unique request id for correlation with the browser session.
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger: structlog.stdlib.BoundLogger = structlog.get_logger("recruit_backoffice.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every HTTP request/response with structured fields.

    Captured fields:
        - ``request_id``  -- unique UUID for the request
        - ``method``      -- HTTP method
        - ``path``        -- request path
        - ``status_code`` -- response status
        - ``duration_ms`` -- wall-clock duration in milliseconds
        - ``user_id``     -- authenticated user (if available)
        - ``role``        -- the user's back-office role (if available)
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        # Service and transport logs emitted while handling this request
        # carry the same id.
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception:
            self._log_request(
                request=request,
                request_id=request_id,
                status_code=500,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                level="error",
            )
            raise

        response.headers["X-Request-ID"] = request_id

        level = "info" if response.status_code < 400 else "warning"
        if response.status_code >= 500:
            level = "error"

        self._log_request(
            request=request,
            request_id=request_id,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            level=level,
        )

        return response

    @staticmethod
    def _log_request(
        *,
        request: Request,
        request_id: str,
        status_code: int,
        duration_ms: float,
        level: str = "info",
    ) -> None:
        session = getattr(request.state, "session", None)

        event_data: dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": str(request.url.path),
            "status_code": status_code,
            "duration_ms": duration_ms,
            "user_id": session.user_id if session else None,
            "role": session.role.value if session and session.role else None,
        }

        log_method = getattr(logger, level, logger.info)
        log_method("http_request", **event_data)
