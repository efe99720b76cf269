"""Dependency injection container for the recruiting back-office.

Builds every remote client explicitly from settings and hands them to the
application services and table views, exposing factory functions suitable
for FastAPI's ``Depends()`` system.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx

from application.catalog import get_table
from application.loading.fetcher import PageFetcher, RetryPolicy
from application.loading.table_loader import LoaderPolicy, TableLoader
from application.services.reminder_service import ReminderService
from application.services.table_view import TableView
from application.services.user_service import UserService
from domain.exceptions import PermissionDeniedError
from domain.models.page_state import PageState
from domain.models.user import AuthSession
from infrastructure.auth.jwt_handler import JWTConfig, JWTHandler
from infrastructure.auth.rbac import can_access_page
from infrastructure.settings import AppSettings, get_settings
from infrastructure.supabase.auth_admin import SupabaseAuthAdmin
from infrastructure.supabase.rest_client import PostgrestClient

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Central DI container that owns all client and service instances."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings or get_settings()
        s = self._settings

        # Transport
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=s.fetch_timeout_seconds)
        self.rest_client = PostgrestClient(
            s.supabase_url,
            s.supabase_anon_key,
            http_client=self.http_client,
            timeout=s.fetch_timeout_seconds,
        )
        self.service_client = PostgrestClient(
            s.supabase_url,
            s.supabase_service_role_key,
            http_client=self.http_client,
            timeout=s.fetch_timeout_seconds,
        )
        self.auth_admin = SupabaseAuthAdmin(
            s.supabase_url,
            s.supabase_service_role_key,
            http_client=self.http_client,
            timeout=s.fetch_timeout_seconds,
        )
        self.jwt_handler = JWTHandler(
            s.supabase_jwt_secret, JWTConfig(audience=s.supabase_jwt_audience)
        )

        # Loading policies
        self.retry_policy = RetryPolicy(
            max_attempts=s.fetch_max_attempts,
            backoff_seconds=s.fetch_backoff_seconds,
            timeout_seconds=s.fetch_timeout_seconds,
        )
        self.loader_policy = LoaderPolicy(
            cooldown_seconds=s.fetch_cooldown_seconds,
            mount_debounce_seconds=s.mount_debounce_seconds,
            navigation_debounce_seconds=s.navigation_debounce_seconds,
            visibility_debounce_seconds=s.visibility_debounce_seconds,
        )

        # Application services
        self.user_service = UserService(auth_admin=self.auth_admin)
        self.reminder_service = ReminderService(
            store=self.service_client,
            window_days=s.reminder_window_days,
        )

        logger.info("ServiceContainer initialized")

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def open_table(
        self,
        table: str,
        session: AuthSession,
        *,
        on_change: Optional[Callable[[PageState[Any]], None]] = None,
    ) -> TableView[Any]:
        """Build a table view scoped to *session*'s access token and role."""
        spec = get_table(table).with_page_size(self._settings.page_size)
        spec = spec.for_user(session.user_id)
        route = spec.descriptor.route
        if not can_access_page(session.role, route):
            raise PermissionDeniedError(
                role=session.role.value if session.role else "unknown",
                action=f"open {route}",
            )

        client = self.rest_client.with_access_token(session.access_token)
        loader: TableLoader[Any] = TableLoader(
            PageFetcher(client, self.retry_policy),
            spec.descriptor,
            policy=self.loader_policy,
            row_factory=spec.row_factory,
            on_change=on_change,
        )
        return TableView(loader, client)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()


# Module-level singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Return the global container singleton."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """Reset the global container (for testing)."""
    global _container
    _container = None


# ---------------------------------------------------------------------------
# FastAPI dependency factories
# ---------------------------------------------------------------------------


def get_user_service() -> UserService:
    return get_container().user_service


def get_reminder_service() -> ReminderService:
    return get_container().reminder_service
