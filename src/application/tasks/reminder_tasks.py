"""Background Celery task that emits calendar reminders."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from application.tasks.celery_app import app

logger = logging.getLogger(__name__)


@app.task(  # type: ignore[untyped-decorator]
    name="application.tasks.reminder_tasks.send_event_reminders",
    bind=True,
    max_retries=2,
    default_retry_delay=10,
)
def send_event_reminders(self: Any) -> dict[str, int]:
    """Create the notifications for every reminder due this minute."""
    from infrastructure.container import ServiceContainer

    async def _run() -> int:
        # asyncio.run gets a fresh loop each time, so the HTTP clients are
        # built and closed inside it.
        container = ServiceContainer()
        try:
            return await container.reminder_service.send_due_reminders()
        finally:
            await container.aclose()

    try:
        created = asyncio.run(_run())
    except Exception as exc:
        logger.exception("Event reminder run failed")
        raise self.retry(exc=exc) from exc

    logger.info("Event reminder run created %d notifications", created)
    return {"notifications_created": created}
