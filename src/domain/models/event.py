from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

REMINDER_NOTIFICATION_TYPE = "calendar_reminder"


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    # PostgREST returns ISO-8601, occasionally with a trailing "Z".
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class CompanyEvent:
    id: str
    title: str
    start_time: datetime
    participants: tuple[str, ...] = ()
    created_by: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> CompanyEvent:
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            start_time=_parse_timestamp(row["start_time"]),
            participants=tuple(row.get("participants") or ()),
            created_by=row.get("created_by"),
        )


@dataclass(frozen=True)
class Reminder:
    at: datetime
    message: str


@dataclass
class Notification:
    user_id_receiver: str
    title: str
    message: str
    related_entity_id: str
    type: str = REMINDER_NOTIFICATION_TYPE
    related_entity_type: str = "event"
    created_by_id: Optional[str] = None

    def to_row(self) -> dict[str, Any]:
        return {
            "user_id_receiver": self.user_id_receiver,
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "related_entity_type": self.related_entity_type,
            "related_entity_id": self.related_entity_id,
            "created_by_id": self.created_by_id,
        }
