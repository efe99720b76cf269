from __future__ import annotations

from datetime import datetime, timedelta

from domain.models.event import CompanyEvent, Reminder

DAY_BEFORE_MESSAGE = "Reminder 1 day before (15:00 the day before)"
MORNING_MESSAGE = "Reminder on the morning of the event"
SHORTLY_BEFORE_MESSAGE = "Reminder 10 minutes before"

DUE_TOLERANCE = timedelta(seconds=60)


class ReminderSchedule:

    def __init__(self, tolerance: timedelta = DUE_TOLERANCE) -> None:
        self._tolerance = tolerance

    def reminders_for(self, event: CompanyEvent) -> list[Reminder]:
        start = event.start_time
        day_before = (start - timedelta(days=1)).replace(hour=15, minute=0, second=0, microsecond=0)
        morning = start.replace(hour=8, minute=0, second=0, microsecond=0)
        shortly_before = start - timedelta(minutes=10)
        return [
            Reminder(at=day_before, message=DAY_BEFORE_MESSAGE),
            Reminder(at=morning, message=MORNING_MESSAGE),
            Reminder(at=shortly_before, message=SHORTLY_BEFORE_MESSAGE),
        ]

    def due_reminders(self, event: CompanyEvent, now: datetime) -> list[Reminder]:
        # Compare at minute resolution; the job runs once a minute.
        tick = now.replace(second=0, microsecond=0)
        return [r for r in self.reminders_for(event) if abs(r.at - tick) < self._tolerance]

    @staticmethod
    def format_message(reminder: Reminder, event: CompanyEvent) -> str:
        return f"{reminder.message}: {event.title} at {event.start_time:%Y-%m-%d %H:%M}"
