"""Tests for domain.services.reminder_schedule."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from domain.models.event import CompanyEvent, Notification
from domain.services.reminder_schedule import (
    DAY_BEFORE_MESSAGE,
    MORNING_MESSAGE,
    SHORTLY_BEFORE_MESSAGE,
    ReminderSchedule,
)

UTC = timezone.utc


@pytest.fixture
def event() -> CompanyEvent:
    return CompanyEvent.from_row(
        {
            "id": "ev-1",
            "title": "Client kickoff",
            "start_time": "2026-03-10T15:00:00Z",
            "participants": ["u-1", "u-2"],
            "created_by": "u-admin",
        }
    )


class TestCompanyEvent:
    def test_from_row_parses_trailing_z(self, event: CompanyEvent) -> None:
        assert event.start_time == datetime(2026, 3, 10, 15, 0, tzinfo=UTC)
        assert event.participants == ("u-1", "u-2")

    def test_missing_participants(self) -> None:
        ev = CompanyEvent.from_row({"id": 7, "start_time": "2026-03-10T15:00:00+00:00"})
        assert ev.id == "7"
        assert ev.participants == ()
        assert ev.title == ""


class TestRemindersFor:
    def test_three_reminders(self, event: CompanyEvent) -> None:
        reminders = ReminderSchedule().reminders_for(event)
        assert [(r.at, r.message) for r in reminders] == [
            (datetime(2026, 3, 9, 15, 0, tzinfo=UTC), DAY_BEFORE_MESSAGE),
            (datetime(2026, 3, 10, 8, 0, tzinfo=UTC), MORNING_MESSAGE),
            (datetime(2026, 3, 10, 14, 50, tzinfo=UTC), SHORTLY_BEFORE_MESSAGE),
        ]


class TestDueReminders:
    @pytest.mark.parametrize(
        ("now", "message"),
        [
            (datetime(2026, 3, 9, 15, 0, 40, tzinfo=UTC), DAY_BEFORE_MESSAGE),
            (datetime(2026, 3, 10, 8, 0, 5, tzinfo=UTC), MORNING_MESSAGE),
            (datetime(2026, 3, 10, 14, 50, 59, tzinfo=UTC), SHORTLY_BEFORE_MESSAGE),
        ],
    )
    def test_due_within_the_minute(self, event, now, message) -> None:
        due = ReminderSchedule().due_reminders(event, now)
        assert [r.message for r in due] == [message]

    def test_nothing_due_between_reminders(self, event) -> None:
        assert ReminderSchedule().due_reminders(event, datetime(2026, 3, 10, 12, 0, tzinfo=UTC)) == []

    def test_next_minute_is_not_due(self, event) -> None:
        assert ReminderSchedule().due_reminders(event, datetime(2026, 3, 10, 14, 51, tzinfo=UTC)) == []


class TestFormatMessage:
    def test_includes_title_and_start(self, event) -> None:
        reminder = ReminderSchedule().reminders_for(event)[2]
        assert ReminderSchedule.format_message(reminder, event) == (
            "Reminder 10 minutes before: Client kickoff at 2026-03-10 15:00"
        )


class TestNotification:
    def test_to_row(self) -> None:
        row = Notification(
            user_id_receiver="u-1", title="Kickoff", message="m", related_entity_id="ev-1"
        ).to_row()
        assert row["type"] == "calendar_reminder"
        assert row["related_entity_type"] == "event"
        assert row["created_by_id"] is None
