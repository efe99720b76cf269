"""Query descriptors for the back-office tables.

Each entry pairs a :class:`QueryDescriptor` with the row type its rows are
parsed into. Select expressions include the embedded relations the table
views display.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from domain.models.query import OrderSpec, QueryDescriptor
from domain.models.recruiting import (
    Candidate,
    Client,
    HrContact,
    Job,
    NotificationRecord,
    Process,
    Sale,
    UserAccount,
)


@dataclass(frozen=True)
class TableSpec:
    descriptor: QueryDescriptor
    row_factory: Callable[[dict[str, Any]], Any]
    # Rows are private to the user named in this column.
    owner_column: Optional[str] = None

    def with_page_size(self, page_size: int) -> TableSpec:
        return replace(self, descriptor=replace(self.descriptor, page_size=page_size))

    def for_user(self, user_id: str) -> TableSpec:
        if self.owner_column is None:
            return self
        scope = ((self.owner_column, f"eq.{user_id}"),)
        return replace(self, descriptor=replace(self.descriptor, filters=self.descriptor.filters + scope))


HR_CONTACTS = TableSpec(
    QueryDescriptor(
        table="hr_contacts",
        select="id,name,position_title,email_1,phone_1,client:client_id(id,client_name)",
        order=OrderSpec("name", ascending=True),
        route="/tables/hr-contacts",
    ),
    HrContact.from_row,
)

CANDIDATES = TableSpec(
    QueryDescriptor(
        table="candidates",
        select="id,name,date_of_birth,email,linkedin,phase,current_employment_status,cv_link,created_at",
        order=OrderSpec("created_at", ascending=False),
        route="/tables/candidates",
    ),
    Candidate.from_row,
)

PROCESSES = TableSpec(
    QueryDescriptor(
        table="processes",
        select=(
            "id,process_status,status_update_date,process_memo,"
            "candidates(id,name,email),jobs(id,position_title),clients(id,client_name),"
            "hr_contacts(id,name),owner_details:owner_id(id,full_name)"
        ),
        order=OrderSpec("status_update_date", ascending=False),
        route="/tables/processes",
    ),
    Process.from_row,
)

JOBS = TableSpec(
    QueryDescriptor(
        table="jobs",
        select=(
            "*,clients(id,client_name,website_url),hr_contacts(id,name,email_1),"
            "owner_details:owner_id(id,full_name)"
        ),
        order=OrderSpec("created_at", ascending=False),
        route="/tables/jobs",
    ),
    Job.from_row,
)

CLIENTS = TableSpec(
    QueryDescriptor(
        table="clients",
        select="*,owner:owner_id(full_name,email)",
        order=OrderSpec("created_at", ascending=False),
        route="/tables/clients",
    ),
    Client.from_row,
)

USERS = TableSpec(
    QueryDescriptor(
        table="users",
        select="id,email,full_name,role,is_active,created_at,updated_at",
        order=OrderSpec("full_name", ascending=True),
        route="/tables/users",
    ),
    UserAccount.from_row,
)

SALES = TableSpec(
    QueryDescriptor(
        table="sales",
        select=(
            "id,process_id,fee_amount,payment_status,invoice_date,"
            "client:client_id(id,client_name),job:job_id(id,position_title),"
            "candidate:candidate_id(id,name),handler:handled_by_id(id,full_name)"
        ),
        order=OrderSpec("invoice_date", ascending=False),
        route="/tables/sales",
    ),
    Sale.from_row,
)

NOTIFICATIONS = TableSpec(
    QueryDescriptor(
        table="notifications",
        select="*",
        order=OrderSpec("created_at", ascending=False),
        route="/notifications",
    ),
    NotificationRecord.from_row,
    owner_column="user_id_receiver",
)

TABLES: dict[str, TableSpec] = {
    spec.descriptor.table: spec
    for spec in (HR_CONTACTS, CANDIDATES, PROCESSES, JOBS, CLIENTS, USERS, SALES, NOTIFICATIONS)
}


def get_table(name: str) -> TableSpec:
    try:
        return TABLES[name]
    except KeyError as exc:
        raise KeyError(f"Unknown table: {name}") from exc
