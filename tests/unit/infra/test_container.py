"""Tests for infrastructure.container and infrastructure.settings."""

from __future__ import annotations

import httpx
import pytest
from pydantic import ValidationError

from application.services.table_view import TableView
from domain.exceptions import PermissionDeniedError
from infrastructure.container import ServiceContainer
from infrastructure.settings import AppSettings


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        supabase_url="https://project.supabase.example",
        supabase_anon_key="anon-key",
        supabase_service_role_key="service-key",
        supabase_jwt_secret="jwt-secret",
        page_size=25,
        fetch_cooldown_seconds=0.0,
        mount_debounce_seconds=0.0,
    )


@pytest.fixture
def container(settings) -> ServiceContainer:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "HEAD":
            return httpx.Response(200, headers={"Content-Range": "*/1"})
        return httpx.Response(200, json=[{"id": "hr-1", "name": "Lan", "client": {"client_name": "Acme"}}])

    return ServiceContainer(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestAppSettings:
    def test_env_prefix(self, monkeypatch) -> None:
        monkeypatch.setenv("APP_PAGE_SIZE", "50")
        monkeypatch.setenv("APP_FETCH_TIMEOUT_SECONDS", "5")
        s = AppSettings()
        assert s.page_size == 50
        assert s.fetch_timeout_seconds == 5.0

    def test_defaults(self) -> None:
        s = AppSettings()
        assert s.fetch_max_attempts == 3
        assert s.fetch_cooldown_seconds == 2.0
        assert s.supabase_jwt_audience == "authenticated"

    def test_page_size_capped_at_server_row_limit(self) -> None:
        with pytest.raises(ValidationError):
            AppSettings(page_size=1001)


class TestServiceContainer:
    def test_policies_follow_settings(self, container) -> None:
        assert container.retry_policy.max_attempts == 3
        assert container.loader_policy.cooldown_seconds == 0.0

    def test_open_table_denied_for_role(self, container, headhunter_session) -> None:
        with pytest.raises(PermissionDeniedError):
            container.open_table("hr_contacts", headhunter_session)

    def test_open_unknown_table(self, container, admin_session) -> None:
        with pytest.raises(KeyError):
            container.open_table("invoices", admin_session)

    @pytest.mark.asyncio
    async def test_open_table_loads_rows(self, container, admin_session) -> None:
        view = container.open_table("hr_contacts", admin_session)
        assert isinstance(view, TableView)
        assert view.loader.descriptor.page_size == 25

        async with view.loader as loader:
            loader.mount("/tables/hr-contacts")
            await loader.wait_idle()
            assert loader.state.total_count == 1
            assert loader.state.items[0].client_name == "Acme"
            assert loader.state.has_more is False

    @pytest.mark.asyncio
    async def test_notifications_are_read_for_the_session_user(self, settings, headhunter_session) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.method == "HEAD":
                return httpx.Response(200, headers={"Content-Range": "*/1"})
            return httpx.Response(200, json=[{"id": "n-1", "user_id_receiver": "u-hh", "title": "Standup"}])

        container = ServiceContainer(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        view = container.open_table("notifications", headhunter_session)

        async with view.loader as loader:
            loader.mount("/notifications")
            await loader.wait_idle()
            assert loader.state.items[0].title == "Standup"

        assert seen
        for request in seen:
            assert request.url.path.endswith("/notifications")
            assert request.url.params["user_id_receiver"] == "eq.u-hh"
