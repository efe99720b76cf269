"""
Prometheus metrics definitions and FastAPI instrumentation.

Defines back-office metrics (table reads, invitations, reminders) and
provides a ``setup_metrics`` function that wires automatic request tracking
into any FastAPI application.
"""

from __future__ import annotations

import time

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response as StarletteResponse


# ======================================================================
# Custom metrics (module-level singletons)
# ======================================================================

api_requests_total = Counter(
    "api_requests_total",
    "Total number of API requests",
    labelnames=["method", "endpoint", "status"],
    registry=REGISTRY,
)

api_request_duration_seconds = Histogram(
    "api_request_duration_seconds",
    "Request latency in seconds",
    labelnames=["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

table_fetch_attempts_total = Counter(
    "table_fetch_attempts_total",
    "Paginated table read attempts by outcome",
    labelnames=["table", "outcome"],
    registry=REGISTRY,
)

table_fetch_duration_seconds = Histogram(
    "table_fetch_duration_seconds",
    "Latency of successful table read attempts",
    labelnames=["table"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0),
    registry=REGISTRY,
)

user_invitations_total = Counter(
    "user_invitations_total",
    "User invitations by outcome",
    labelnames=["outcome"],
    registry=REGISTRY,
)

event_reminders_sent_total = Counter(
    "event_reminders_sent_total",
    "Calendar reminder notifications created",
    registry=REGISTRY,
)


# ======================================================================
# Middleware for automatic request instrumentation
# ======================================================================

class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware that records request count and latency per endpoint."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        method = request.method
        endpoint = self._get_path_template(request)

        start = time.perf_counter()
        response: Response = await call_next(request)
        duration = time.perf_counter() - start

        api_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status=str(response.status_code),
        ).inc()

        api_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint,
        ).observe(duration)

        return response

    @staticmethod
    def _get_path_template(request: Request) -> str:
        """
        Attempt to resolve the route template so that cardinality stays
        bounded.
        """
        route = request.scope.get("route")
        if route and hasattr(route, "path"):
            return route.path
        return request.url.path


# ======================================================================
# Setup helper
# ======================================================================

def setup_metrics(app: FastAPI) -> None:
    """
    Instrument a FastAPI application with Prometheus metrics.

    * Adds the ``PrometheusMiddleware`` for automatic request tracking.
    * Registers a ``/metrics`` endpoint that serves the Prometheus
      exposition format.
    """

    app.add_middleware(PrometheusMiddleware)

    @app.get("/metrics", include_in_schema=False)
    async def metrics_endpoint() -> StarletteResponse:
        body = generate_latest(REGISTRY)
        return StarletteResponse(
            content=body,
            media_type=CONTENT_TYPE_LATEST,
        )
