"""Unit tests for ReminderService.send_due_reminders."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from application.services.reminder_service import ReminderService
from infrastructure.adapters import InMemoryTableStore

UTC = timezone.utc
NOW = datetime(2026, 3, 10, 14, 50, 30, tzinfo=UTC)


@pytest.fixture
def events_store() -> InMemoryTableStore:
    return InMemoryTableStore(
        {
            "company_events": [
                {
                    "id": "ev-1",
                    "title": "Client kickoff",
                    "start_time": "2026-03-10T15:00:00+00:00",
                    "participants": ["u-1", "u-2"],
                    "created_by": "u-admin",
                },
                {
                    "id": "ev-2",
                    "title": "Quarterly review",
                    "start_time": "2026-03-11T10:00:00+00:00",
                    "participants": ["u-1"],
                },
                {
                    "id": "ev-old",
                    "title": "Last month",
                    "start_time": "2026-02-01T15:00:00+00:00",
                    "participants": ["u-1"],
                },
            ],
            "notifications": [],
        }
    )


@pytest.mark.asyncio
class TestSendDueReminders:
    async def test_notifies_every_participant(self, events_store) -> None:
        created = await ReminderService(events_store).send_due_reminders(NOW)
        assert created == 2

        rows = events_store.tables["notifications"]
        assert {r["user_id_receiver"] for r in rows} == {"u-1", "u-2"}
        assert all(r["related_entity_id"] == "ev-1" for r in rows)
        assert rows[0]["message"] == "Reminder 10 minutes before: Client kickoff at 2026-03-10 15:00"
        assert rows[0]["type"] == "calendar_reminder"
        assert rows[0]["created_by_id"] == "u-admin"

    async def test_second_run_is_deduplicated(self, events_store) -> None:
        svc = ReminderService(events_store)
        assert await svc.send_due_reminders(NOW) == 2
        assert await svc.send_due_reminders(NOW) == 0
        assert len(events_store.tables["notifications"]) == 2

    async def test_other_reminder_for_same_event_is_not_a_duplicate(self, events_store) -> None:
        svc = ReminderService(events_store)
        await svc.send_due_reminders(datetime(2026, 3, 10, 8, 0, tzinfo=UTC))
        assert await svc.send_due_reminders(NOW) == 2
        assert len(events_store.tables["notifications"]) == 4

    async def test_day_before_reminder(self, events_store) -> None:
        created = await ReminderService(events_store).send_due_reminders(
            datetime(2026, 3, 10, 15, 0, 10, tzinfo=UTC)
        )
        messages = [r["message"] for r in events_store.tables["notifications"]]
        assert created == 1
        assert messages[0].startswith("Reminder 1 day before")
        assert "Quarterly review" in messages[0]

    async def test_nothing_due(self, events_store) -> None:
        assert await ReminderService(events_store).send_due_reminders(
            datetime(2026, 3, 10, 12, 0, tzinfo=UTC)
        ) == 0
