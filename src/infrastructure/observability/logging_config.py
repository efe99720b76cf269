"""
Structured logging configuration using structlog.

Loader, transport and API events are emitted as JSON lines enriched with
timestamps, log levels and the service name. Stdlib loggers used by the
application services go through the same renderer.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

SERVICE_NAME: str = "recruit-backoffice"

# Third-party loggers that log every request at INFO.
_NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


def add_service_name(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Inject the service name into every log event."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def setup_logging(log_level: str = "INFO", *, json_logs: bool = True) -> None:
    """
    Configure structlog and the stdlib logging bridge.

    Call this once at process startup (FastAPI ``lifespan`` or a Celery
    worker signal).

    Parameters
    ----------
    log_level:
        Minimum severity level as a string (``DEBUG``, ``INFO``, ...).
    json_logs:
        Render JSON lines when true, a coloured console format otherwise.
    """

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_name,  # type: ignore[list-item]
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Return a bound structlog logger pre-populated with the given *name*.

    Additional context can be attached via ``.bind()``::

        log = get_logger("recruit_backoffice.table_loader")
        log = log.bind(table="hr_contacts")
        log.info("page_committed", page=2, rows=20)
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
