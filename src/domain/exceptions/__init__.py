from domain.exceptions.access_exceptions import (
    AuthenticationRequiredError,
    InvalidInvitationError,
    InvitationFailedError,
    PermissionDeniedError,
)
from domain.exceptions.fetch_exceptions import (
    DomainException,
    EmptyResultError,
    FetchCancelledError,
    FetchError,
    FetchTimeoutError,
    NetworkOfflineError,
    RemoteError,
)

__all__ = [
    "AuthenticationRequiredError",
    "DomainException",
    "EmptyResultError",
    "FetchCancelledError",
    "FetchError",
    "FetchTimeoutError",
    "InvalidInvitationError",
    "InvitationFailedError",
    "NetworkOfflineError",
    "PermissionDeniedError",
    "RemoteError",
]
