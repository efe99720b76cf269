"""Celery application configuration for the recruiting back-office.

Sets up the broker (Redis), result backend, serialisation, the default retry
policy and the beat schedule for periodic jobs.
"""

from __future__ import annotations

from celery import Celery

from infrastructure.settings import get_settings

_settings = get_settings()

app = Celery("recruit_backoffice")

# ---------------------------------------------------------------------------
# Broker and result backend
# ---------------------------------------------------------------------------

app.conf.broker_url = _settings.celery_broker_url
app.conf.result_backend = _settings.celery_result_backend

# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------

app.conf.accept_content = ["json"]
app.conf.task_serializer = "json"
app.conf.result_serializer = "json"

# ---------------------------------------------------------------------------
# Task routing
# ---------------------------------------------------------------------------

app.conf.task_routes = {
    "application.tasks.reminder_tasks.*": {"queue": "reminders"},
}

# ---------------------------------------------------------------------------
# Default retry policy
# ---------------------------------------------------------------------------

app.conf.task_annotations = {
    "*": {
        "max_retries": 3,
        "default_retry_delay": 10,
        "retry_backoff": True,
        "retry_backoff_max": 60,
        "retry_jitter": True,
    },
}

# ---------------------------------------------------------------------------
# Periodic jobs
# ---------------------------------------------------------------------------

app.conf.beat_schedule = {
    "send-event-reminders": {
        "task": "application.tasks.reminder_tasks.send_event_reminders",
        "schedule": 60.0,
    },
}

# ---------------------------------------------------------------------------
# Miscellaneous
# ---------------------------------------------------------------------------

app.conf.task_acks_late = True
app.conf.worker_prefetch_multiplier = 1
# A reminder run must finish well inside its one-minute tick.
app.conf.task_time_limit = 55
app.conf.task_soft_time_limit = 50
app.conf.timezone = "UTC"

# ---------------------------------------------------------------------------
# Autodiscovery
# ---------------------------------------------------------------------------

app.autodiscover_tasks(["application.tasks.reminder_tasks"])
