"""Application service for provisioning back-office users.

``UserService`` validates an invitation request, checks that the caller may
invite, and delegates the actual provisioning to the auth provider through
the :class:`AuthAdmin` port.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from domain.exceptions import (
    FetchError,
    InvalidInvitationError,
    InvitationFailedError,
    PermissionDeniedError,
)
from domain.models.user import AuthSession, UserRole
from infrastructure.observability.metrics import user_invitations_total

logger = logging.getLogger(__name__)


class AuthAdmin(Protocol):
    """Port: privileged user provisioning."""

    async def invite_user_by_email(self, email: str, data: dict[str, Any]) -> dict[str, Any]: ...


class UserService:

    def __init__(self, auth_admin: AuthAdmin) -> None:
        self._auth_admin = auth_admin

    async def invite_user(
        self,
        email: Optional[str],
        full_name: Optional[str],
        role: Optional[str],
        actor: AuthSession,
    ) -> dict[str, Any]:
        """Invite *email* with the given name and role on behalf of *actor*."""
        if not email or not full_name or not role:
            user_invitations_total.labels(outcome="invalid").inc()
            raise InvalidInvitationError()

        parsed_role = UserRole.parse(role)
        if parsed_role is None:
            user_invitations_total.labels(outcome="invalid").inc()
            raise InvalidInvitationError(f"Unknown role: {role}")

        if not actor.is_admin:
            user_invitations_total.labels(outcome="denied").inc()
            raise PermissionDeniedError(
                role=actor.role.value if actor.role else "unknown",
                action="invite users",
            )

        try:
            user = await self._auth_admin.invite_user_by_email(
                email,
                {"full_name": full_name.strip(), "role": parsed_role.value},
            )
        except FetchError as exc:
            user_invitations_total.labels(outcome="failed").inc()
            logger.warning("Invitation of %s by %s failed: %s", email, actor.user_id, exc.detail)
            raise InvitationFailedError(email=email, reason=exc.detail) from exc

        user_invitations_total.labels(outcome="invited").inc()
        logger.info("User %s invited as %s by %s", email, parsed_role.value, actor.user_id)
        return user
