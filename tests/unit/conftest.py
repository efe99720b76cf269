"""Shared fixtures for unit tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from application.loading.fetcher import PageFetcher, RetryPolicy
from application.loading.table_loader import LoaderPolicy
from domain.models.query import OrderSpec, QueryDescriptor
from domain.models.user import AuthSession, UserRole
from infrastructure.adapters import InMemoryAuthAdmin, InMemoryTableStore

HR_ROUTE = "/tables/hr-contacts"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_contacts(n: int) -> list[dict]:
    return [
        {
            "id": f"hr-{i:03d}",
            "name": f"Contact {i:03d}",
            "position_title": "Talent Partner",
            "email_1": f"contact{i}@client.example",
            "client": [{"id": "c-1", "client_name": "Acme"}],
        }
        for i in range(n)
    ]


@pytest.fixture
def store() -> InMemoryTableStore:
    return InMemoryTableStore({"hr_contacts": make_contacts(45)})


@pytest.fixture
def descriptor() -> QueryDescriptor:
    return QueryDescriptor(
        table="hr_contacts",
        select="*",
        order=OrderSpec("name", ascending=True),
        page_size=20,
        route=HR_ROUTE,
    )


@pytest.fixture
def retry_policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=3, backoff_seconds=0.0, timeout_seconds=1.0)


@pytest.fixture
def fetcher(store, retry_policy) -> PageFetcher:
    return PageFetcher(store, retry_policy)


@pytest.fixture
def instant_policy() -> LoaderPolicy:
    return LoaderPolicy(
        cooldown_seconds=0.0,
        mount_debounce_seconds=0.0,
        navigation_debounce_seconds=0.0,
        visibility_debounce_seconds=0.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def auth_admin() -> InMemoryAuthAdmin:
    return InMemoryAuthAdmin()


@pytest.fixture
def admin_session() -> AuthSession:
    return AuthSession(user_id="u-admin", access_token="token", email="admin@agency.example", role=UserRole.ADMIN)


@pytest.fixture
def headhunter_session() -> AuthSession:
    return AuthSession(user_id="u-hh", access_token="token", email="hh@agency.example", role=UserRole.HEADHUNTER)
