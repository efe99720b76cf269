"""Tests for infrastructure.auth.rbac."""

from __future__ import annotations

import asyncio

import pytest

from domain.exceptions import PermissionDeniedError
from domain.models.user import AuthSession, UserRole
from infrastructure.auth.rbac import ROLE_ALLOWED_PAGES, can_access_page, require_role


class TestRoleAllowedPages:
    def test_every_role_mapped(self) -> None:
        assert set(ROLE_ALLOWED_PAGES) == set(UserRole)

    @pytest.mark.parametrize("role", list(UserRole))
    def test_common_pages_for_everyone(self, role) -> None:
        assert can_access_page(role, "/dashboard")
        assert can_access_page(role, "/calendar")
        assert can_access_page(role, "/notifications")

    def test_headhunter_cannot_open_clients(self) -> None:
        assert not can_access_page(UserRole.HEADHUNTER, "/tables/clients")
        assert can_access_page(UserRole.HEADHUNTER, "/tables/candidates")

    def test_bd_cannot_open_candidates(self) -> None:
        assert not can_access_page(UserRole.BD, "/tables/candidates")

    def test_only_admin_and_hr_see_users(self) -> None:
        allowed = {role for role in UserRole if can_access_page(role, "/tables/users")}
        assert allowed == {UserRole.ADMIN, UserRole.HR}

    def test_trailing_slash(self) -> None:
        assert can_access_page(UserRole.MANAGER, "/tables/jobs/")

    def test_no_role(self) -> None:
        assert not can_access_page(None, "/dashboard")


class TestUserRole:
    def test_parse_is_case_insensitive(self) -> None:
        assert UserRole.parse("hr") is UserRole.HR
        assert UserRole.parse(" Admin ") is UserRole.ADMIN

    def test_parse_unknown(self) -> None:
        assert UserRole.parse("Intern") is None
        assert UserRole.parse(None) is None


class TestRequireRole:
    def test_returns_async_callable(self) -> None:
        dep = require_role(UserRole.ADMIN)
        assert callable(dep)
        assert asyncio.iscoroutinefunction(dep)

    @pytest.mark.asyncio
    async def test_admits_allowed_role(self) -> None:
        session = AuthSession(user_id="u-1", access_token="t", role=UserRole.ADMIN)
        assert await require_role(UserRole.ADMIN)(session=session) is session

    @pytest.mark.asyncio
    async def test_rejects_other_roles(self) -> None:
        session = AuthSession(user_id="u-1", access_token="t", role=UserRole.BD)
        with pytest.raises(PermissionDeniedError):
            await require_role(UserRole.ADMIN, UserRole.HR)(session=session)
