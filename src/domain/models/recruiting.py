"""Row types for the recruiting tables.

PostgREST may embed a to-one relation either as an object or as a
single-element list depending on how the foreign key is declared, so every
embedded relation is read through :func:`relation_field`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, TypeVar

R = TypeVar("R", bound="_Row")


def relation_field(relation: Any, name: str) -> Any:
    """Return ``name`` from an embedded relation given as a dict or list."""
    if not relation:
        return None
    target = relation[0] if isinstance(relation, list) else relation
    if not isinstance(target, Mapping):
        return None
    return target.get(name)


class _Row:
    @classmethod
    def from_row(cls: type[R], row: Mapping[str, Any]) -> R:
        known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        return cls(**{k: v for k, v in row.items() if k in known})


@dataclass
class HrContact(_Row):
    id: str = ""
    name: str = ""
    position_title: Optional[str] = None
    email_1: Optional[str] = None
    phone_1: Optional[str] = None
    client: Any = None

    @property
    def client_name(self) -> Optional[str]:
        return relation_field(self.client, "client_name")


@dataclass
class Candidate(_Row):
    id: str = ""
    name: str = ""
    date_of_birth: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    phase: Optional[str] = None
    current_employment_status: Optional[str] = None
    cv_link: Optional[str] = None
    created_at: Optional[str] = None


@dataclass
class Process(_Row):
    id: str = ""
    process_status: str = ""
    status_update_date: Optional[str] = None
    process_memo: Optional[str] = None
    candidates: Any = None
    jobs: Any = None
    clients: Any = None
    hr_contacts: Any = None
    owner_details: Any = None

    @property
    def candidate_name(self) -> Optional[str]:
        return relation_field(self.candidates, "name")

    @property
    def position_title(self) -> Optional[str]:
        return relation_field(self.jobs, "position_title")

    @property
    def owner_name(self) -> Optional[str]:
        return relation_field(self.owner_details, "full_name")


@dataclass
class Job(_Row):
    id: str = ""
    position_title: str = ""
    phase: Optional[str] = None
    job_rank: Optional[str] = None
    min_monthly_salary: Optional[float] = None
    max_monthly_salary: Optional[float] = None
    work_location: Optional[str] = None
    clients: Any = None
    hr_contacts: Any = None
    owner_details: Any = None
    created_at: Optional[str] = None

    @property
    def client_name(self) -> Optional[str]:
        return relation_field(self.clients, "client_name")


@dataclass
class Client(_Row):
    id: str = ""
    client_name: str = ""
    client_category: Optional[str] = None
    client_industry: Optional[str] = None
    location: Optional[str] = None
    client_rank: Optional[str] = None
    phase: Optional[str] = None
    owner: Any = None
    created_at: Optional[str] = None


@dataclass
class UserAccount(_Row):
    id: str = ""
    email: str = ""
    full_name: str = ""
    role: Optional[str] = None
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class Sale(_Row):
    id: str = ""
    process_id: Optional[str] = None
    fee_amount: Optional[float] = None
    payment_status: Optional[str] = None
    invoice_date: Optional[str] = None
    client: Any = None
    job: Any = None
    candidate: Any = None
    handler: Any = None

    @property
    def client_name(self) -> Optional[str]:
        return relation_field(self.client, "client_name")

    @property
    def candidate_name(self) -> Optional[str]:
        return relation_field(self.candidate, "name")

    @property
    def handler_name(self) -> Optional[str]:
        return relation_field(self.handler, "full_name")


@dataclass
class NotificationRecord(_Row):
    id: str = ""
    user_id_receiver: str = ""
    title: str = ""
    message: str = ""
    type: Optional[str] = None
    read: bool = False
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[str] = None
    created_by_id: Optional[str] = None
    created_at: Optional[str] = None
