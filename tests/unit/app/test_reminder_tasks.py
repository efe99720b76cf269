"""Tests for the Celery reminder task and its beat schedule."""

from __future__ import annotations

import pytest

from application.tasks.celery_app import app as celery_app
from application.tasks.reminder_tasks import send_event_reminders


class _FakeReminderService:
    async def send_due_reminders(self) -> int:
        return 3


class _FakeContainer:
    closed = False

    def __init__(self) -> None:
        self.reminder_service = _FakeReminderService()

    async def aclose(self) -> None:
        _FakeContainer.closed = True


class TestCeleryConfig:
    def test_reminders_run_every_minute(self) -> None:
        entry = celery_app.conf.beat_schedule["send-event-reminders"]
        assert entry["task"] == send_event_reminders.name
        assert entry["schedule"] == 60.0

    def test_routed_to_reminders_queue(self) -> None:
        assert celery_app.conf.task_routes["application.tasks.reminder_tasks.*"] == {"queue": "reminders"}


class TestSendEventReminders:
    def test_runs_service_and_closes_container(self, monkeypatch) -> None:
        import infrastructure.container as container_module

        monkeypatch.setattr(container_module, "ServiceContainer", _FakeContainer)
        result = send_event_reminders.apply().get()
        assert result == {"notifications_created": 3}
        assert _FakeContainer.closed is True


@pytest.fixture(autouse=True)
def _reset_fake():
    _FakeContainer.closed = False
    yield
