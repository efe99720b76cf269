from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain-layer exceptions.

    Carries HTTP-mapping metadata so the presentation layer can render the
    ``{"error": message}`` envelope without knowing exception internals.
    """

    def __init__(
        self,
        detail: str = "",
        *,
        title: str = "Domain Error",
        status_code: int = 400,
        error_type: str = "about:blank",
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.title = title
        self.status_code = status_code
        self.error_type = error_type


class FetchError(DomainException):
    """Base class for failures of a read against the remote table endpoint."""

    retryable: bool = True

    def __init__(self, detail: str = "", *, title: str = "Fetch Failed", status_code: int = 502) -> None:
        super().__init__(
            detail=detail,
            title=title,
            status_code=status_code,
            error_type="https://api.recruit-backoffice.example/problems/fetch-failed",
        )


class FetchCancelledError(FetchError):
    """The request was superseded or its owner was torn down.

    Never shown to the user and never retried.
    """

    retryable = False

    def __init__(self, reason: str = "superseded") -> None:
        self.reason = reason
        super().__init__(detail=f"Fetch cancelled: {reason}", title="Fetch Cancelled", status_code=499)


class FetchTimeoutError(FetchError):
    def __init__(self, timeout_seconds: float = 0.0) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            detail=f"Query timed out after {timeout_seconds:g}s",
            title="Fetch Timeout",
            status_code=504,
        )


class RemoteError(FetchError):
    """The endpoint answered with a failure (permission, malformed query, ...)."""

    def __init__(self, message: str = "", *, status: int = 0, code: str | None = None) -> None:
        self.message = message
        self.status = status
        self.code = code
        super().__init__(detail=message or f"Remote error (HTTP {status})", title="Remote Error")


class EmptyResultError(FetchError):
    def __init__(self, table: str = "") -> None:
        self.table = table
        super().__init__(detail=f"No data received from server for '{table}'", title="Empty Result")


class NetworkOfflineError(FetchError):
    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        super().__init__(
            detail=f"Network unavailable: {reason}" if reason else "Network unavailable",
            title="Network Offline",
            status_code=503,
        )
