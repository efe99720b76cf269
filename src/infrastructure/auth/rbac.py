"""
Role-Based Access Control (RBAC) for the back-office.

Each ``UserRole`` is mapped to the set of pages (table routes) it may open.
The FastAPI dependencies ``get_current_session`` and ``require_role``
authenticate the bearer token and enforce a role at the endpoint level.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import Depends, Request

from domain.exceptions import AuthenticationRequiredError, PermissionDeniedError
from domain.models.user import AuthSession, UserRole

if TYPE_CHECKING:
    from collections.abc import Callable

# ======================================================================
# Role -> allowed pages mapping
# ======================================================================

_COMMON_PAGES: frozenset[str] = frozenset({"/dashboard", "/calendar", "/notifications"})

ROLE_ALLOWED_PAGES: dict[UserRole, frozenset[str]] = {
    UserRole.ADMIN: _COMMON_PAGES
    | {
        "/tables/candidates",
        "/tables/clients",
        "/tables/hr-contacts",
        "/tables/jobs",
        "/tables/admin-jobs",
        "/tables/processes",
        "/tables/sales",
        "/tables/users",
    },
    UserRole.MANAGER: _COMMON_PAGES
    | {
        "/tables/candidates",
        "/tables/clients",
        "/tables/hr-contacts",
        "/tables/jobs",
        "/tables/processes",
        "/tables/sales",
    },
    UserRole.HR: _COMMON_PAGES
    | {
        "/tables/candidates",
        "/tables/clients",
        "/tables/hr-contacts",
        "/tables/jobs",
        "/tables/admin-jobs",
        "/tables/processes",
        "/tables/sales",
        "/tables/users",
    },
    UserRole.HEADHUNTER: _COMMON_PAGES
    | {
        "/tables/candidates",
        "/tables/jobs",
        "/tables/processes",
    },
    UserRole.BD: _COMMON_PAGES
    | {
        "/tables/clients",
        "/tables/hr-contacts",
        "/tables/jobs",
        "/tables/admin-jobs",
        "/tables/sales",
    },
}


def can_access_page(role: UserRole | None, path: str) -> bool:
    """Return whether *role* may open the page at *path*."""
    if role is None:
        return False
    normalised = path.rstrip("/") or "/"
    return normalised in ROLE_ALLOWED_PAGES.get(role, frozenset())


# ======================================================================
# FastAPI dependencies
# ======================================================================


def _bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization")
    if not header:
        raise AuthenticationRequiredError("No authorization header")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationRequiredError("Authorization header must be a bearer token")
    return token.strip()


async def get_current_session(request: Request) -> AuthSession:
    """Authenticate the request and attach the session to ``request.state``."""
    from infrastructure.container import get_container

    session = get_container().jwt_handler.session_from_token(_bearer_token(request))
    request.state.session = session
    return session


def require_role(*roles: UserRole) -> Callable[..., Any]:
    """
    Return a FastAPI dependency that only admits sessions holding one of
    *roles*.

    Usage::

        @router.post("/invite-user")
        async def invite(session: AuthSession = Depends(require_role(UserRole.ADMIN))): ...
    """

    allowed = frozenset(roles)

    async def _check(session: AuthSession = Depends(get_current_session)) -> AuthSession:
        if session.role not in allowed:
            raise PermissionDeniedError(
                role=session.role.value if session.role else "unknown",
                action="call this function",
            )
        return session

    return _check
