"""FastAPI application factory for the recruiting back-office functions."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.exceptions import DomainException
from infrastructure.container import get_container, reset_container
from infrastructure.observability.logging_config import get_logger, setup_logging
from infrastructure.observability.metrics import setup_metrics
from infrastructure.settings import get_settings

from .api.v1 import functions
from .middleware.request_logging import RequestLoggingMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = get_logger("recruit_backoffice.api")

APP_VERSION = "1.0.0"
CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization"]

# ---------------------------------------------------------------------------
# Lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging(get_settings().log_level)
    container = get_container()
    app.state.container = container
    yield
    await container.aclose()
    reset_container()


# ---------------------------------------------------------------------------
# Exception handlers ({"error": message} envelope)
# ---------------------------------------------------------------------------


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    logger.info(
        "domain_error",
        path=str(request.url.path),
        title=exc.title,
        status_code=exc.status_code,
    )
    return _error_json(exc.status_code, exc.detail or exc.title)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_json(exc.status_code, str(exc.detail))


async def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = []
    for err in exc.errors():
        field = ".".join(str(loc) for loc in err.get("loc", []) if loc != "body")
        problems.append(f"{field}: {err.get('msg', '')}" if field else err.get("msg", ""))
    return _error_json(status.HTTP_400_BAD_REQUEST, "; ".join(problems) or "Invalid request body.")


async def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=str(request.url.path))
    return _error_json(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Unknown error")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Recruiting Back-Office Functions",
        version=APP_VERSION,
        description=(
            "Privileged operations for the recruiting back-office: user "
            "invitation and calendar event reminders."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=_lifespan,
    )

    # -- CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        expose_headers=["X-Request-ID"],
    )

    # -- Custom middleware
    app.add_middleware(RequestLoggingMiddleware)
    setup_metrics(app)

    # -- API routers
    app.include_router(functions.router)

    # -- Exception handlers
    app.add_exception_handler(DomainException, _domain_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)

    @app.get("/health", tags=["Operations"], summary="Health check", response_model=dict)
    async def health_check() -> dict[str, Any]:
        return {
            "status": "healthy",
            "version": APP_VERSION,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app


app = create_app()
