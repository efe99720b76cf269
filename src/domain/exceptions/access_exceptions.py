from __future__ import annotations

from domain.exceptions.fetch_exceptions import DomainException


class AuthenticationRequiredError(DomainException):
    def __init__(self, reason: str = "No authorization header") -> None:
        self.reason = reason
        super().__init__(
            detail=reason,
            title="Authentication Required",
            status_code=401,
            error_type="https://api.recruit-backoffice.example/problems/authentication-required",
        )


class PermissionDeniedError(DomainException):
    def __init__(self, role: str = "", action: str = "") -> None:
        self.role = role
        self.action = action
        super().__init__(
            detail=f"Role '{role}' is not allowed to {action}",
            title="Permission Denied",
            status_code=403,
            error_type="https://api.recruit-backoffice.example/problems/permission-denied",
        )


class InvalidInvitationError(DomainException):
    def __init__(self, reason: str = "Missing email, full_name or role.") -> None:
        self.reason = reason
        super().__init__(
            detail=reason,
            title="Invalid Invitation",
            status_code=400,
            error_type="https://api.recruit-backoffice.example/problems/invalid-invitation",
        )


class InvitationFailedError(DomainException):
    def __init__(self, email: str = "", reason: str = "") -> None:
        self.email = email
        self.reason = reason
        super().__init__(
            detail=reason or f"Could not invite {email}",
            title="Invitation Failed",
            status_code=400,
            error_type="https://api.recruit-backoffice.example/problems/invitation-failed",
        )
