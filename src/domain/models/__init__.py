from domain.models.event import CompanyEvent, Notification, Reminder
from domain.models.page_state import LoaderPhase, PageState
from domain.models.query import OrderSpec, PageQuery, QueryDescriptor
from domain.models.recruiting import (
    Candidate,
    Client,
    HrContact,
    Job,
    NotificationRecord,
    Process,
    Sale,
    UserAccount,
    relation_field,
)
from domain.models.user import AuthSession, UserRole

__all__ = [
    "AuthSession",
    "Candidate",
    "Client",
    "CompanyEvent",
    "HrContact",
    "Job",
    "LoaderPhase",
    "Notification",
    "NotificationRecord",
    "OrderSpec",
    "PageQuery",
    "PageState",
    "Process",
    "QueryDescriptor",
    "Reminder",
    "Sale",
    "UserAccount",
    "UserRole",
    "relation_field",
]
