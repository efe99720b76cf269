"""Creates calendar reminder notifications for upcoming company events."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Optional, Protocol, Sequence

from domain.models.event import REMINDER_NOTIFICATION_TYPE, CompanyEvent, Notification
from domain.services.reminder_schedule import ReminderSchedule
from infrastructure.observability.metrics import event_reminders_sent_total

logger = logging.getLogger(__name__)

EVENTS_TABLE = "company_events"
NOTIFICATIONS_TABLE = "notifications"


class RecordStore(Protocol):
    """Port: filtered reads and inserts with service-role privileges."""

    async def select_where(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[tuple[str, str]] = (),
    ) -> list[dict[str, Any]]: ...

    async def insert(self, table: str, values: dict[str, Any]) -> list[dict[str, Any]]: ...


class ReminderService:

    def __init__(
        self,
        store: RecordStore,
        schedule: Optional[ReminderSchedule] = None,
        window_days: int = 2,
    ) -> None:
        self._store = store
        self._schedule = schedule or ReminderSchedule()
        self._window = timedelta(days=window_days)

    async def send_due_reminders(self, now: Optional[datetime] = None) -> int:
        """Insert every reminder due at *now*; return how many were created."""
        now = now or datetime.now(UTC)
        rows = await self._store.select_where(
            EVENTS_TABLE,
            filters=[
                ("start_time", f"gte.{(now - self._window).isoformat()}"),
                ("start_time", f"lte.{(now + self._window).isoformat()}"),
            ],
        )

        created = 0
        for event in (CompanyEvent.from_row(row) for row in rows):
            for reminder in self._schedule.due_reminders(event, now):
                message = self._schedule.format_message(reminder, event)
                for user_id in event.participants:
                    if await self._already_notified(user_id, event.id, message):
                        continue
                    notification = Notification(
                        user_id_receiver=user_id,
                        title=event.title,
                        message=message,
                        related_entity_id=event.id,
                        created_by_id=event.created_by,
                    )
                    await self._store.insert(NOTIFICATIONS_TABLE, notification.to_row())
                    created += 1

        if created:
            event_reminders_sent_total.inc(created)
        logger.info("Event reminder run at %s created %d notifications", now.isoformat(), created)
        return created

    async def _already_notified(self, user_id: str, event_id: str, message: str) -> bool:
        existing = await self._store.select_where(
            NOTIFICATIONS_TABLE,
            columns="id",
            filters=[
                ("user_id_receiver", f"eq.{user_id}"),
                ("related_entity_id", f"eq.{event_id}"),
                ("type", f"eq.{REMINDER_NOTIFICATION_TYPE}"),
                ("message", f"eq.{message}"),
            ],
        )
        return bool(existing)
