"""
PostgREST transport over ``httpx``.

A single HTTP path for every table read and write: the loader's retry,
timeout and cancellation live above it in ``PageFetcher``, so this module only
translates requests into PostgREST query parameters and failures into the
domain error taxonomy.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import httpx

from domain.exceptions import (
    EmptyResultError,
    FetchTimeoutError,
    NetworkOfflineError,
    RemoteError,
)
from domain.models.query import PageQuery
from infrastructure.observability.logging_config import get_logger

logger = get_logger("recruit_backoffice.postgrest")

DEFAULT_TIMEOUT_SECONDS: float = 15.0


# ======================================================================
# Shared HTTP helpers (also used by the auth admin client)
# ======================================================================


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    timeout: float,
    **kwargs: Any,
) -> httpx.Response:
    """Send one request, mapping transport and HTTP failures to domain errors."""
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as exc:
        raise FetchTimeoutError(timeout) from exc
    except httpx.TransportError as exc:
        raise NetworkOfflineError(str(exc) or type(exc).__name__) from exc

    if response.is_error:
        raise remote_error_from(response)
    return response


def remote_error_from(response: httpx.Response) -> RemoteError:
    """Build a ``RemoteError`` from a PostgREST / GoTrue error body."""
    message: Optional[str] = None
    code: Optional[str] = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = (
            body.get("message")
            or body.get("msg")
            or body.get("error_description")
            or body.get("error")
        )
        raw_code = body.get("code") or body.get("error_code")
        code = str(raw_code) if raw_code is not None else None
    if not message:
        message = f"HTTP {response.status_code} {response.reason_phrase}".strip()
    return RemoteError(message, status=response.status_code, code=code)


def parse_content_range(value: Optional[str], table: str) -> int:
    """Extract the total from a ``Content-Range`` header such as ``0-19/45``."""
    if not value or "/" not in value:
        raise EmptyResultError(table)
    total = value.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        raise EmptyResultError(table)
    return int(total)


# ======================================================================
# Client
# ======================================================================


class PostgrestClient:
    """Table-scoped reads and writes against ``{base_url}/rest/v1``.

    The client is constructed explicitly and injected; it never reads global
    configuration. ``with_access_token`` derives a per-session client that
    shares the underlying connection pool.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        access_token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._access_token = access_token
        self._timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    def with_access_token(self, access_token: str) -> PostgrestClient:
        return PostgrestClient(
            self._base_url,
            self._api_key,
            access_token=access_token,
            http_client=self._client,
            timeout=self._timeout,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def select(self, query: PageQuery) -> Optional[list[dict[str, Any]]]:
        """GET one ranged page; ``None`` when the server sent no payload."""
        response = await self._send("GET", query.table, params=query.to_params())
        return self._rows(response)

    async def select_where(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[tuple[str, str]] = (),
    ) -> list[dict[str, Any]]:
        """Unpaged filtered read, for background jobs."""
        response = await self._send("GET", table, params=[("select", columns), *filters])
        rows = self._rows(response)
        if rows is None:
            raise EmptyResultError(table)
        return rows

    async def count(self, table: str, filters: Sequence[tuple[str, str]] = ()) -> int:
        """Exact row count via a head-only request."""
        response = await self._send(
            "HEAD",
            table,
            params=[("select", "*"), *filters],
            headers={"Prefer": "count=exact"},
        )
        return parse_content_range(response.headers.get("content-range"), table)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, table: str, values: dict[str, Any] | list[dict[str, Any]]) -> list[dict[str, Any]]:
        response = await self._send(
            "POST", table, json=values, headers={"Prefer": "return=representation"}
        )
        return self._rows(response) or []

    async def update(
        self, table: str, key: str, value: Any, changes: dict[str, Any]
    ) -> list[dict[str, Any]]:
        response = await self._send(
            "PATCH",
            table,
            params=[(key, f"eq.{value}")],
            json=changes,
            headers={"Prefer": "return=representation"},
        )
        return self._rows(response) or []

    async def delete(self, table: str, key: str, value: Any) -> None:
        await self._send("DELETE", table, params=[(key, f"eq.{value}")])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _headers(self, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _send(
        self,
        method: str,
        table: str,
        *,
        headers: Optional[dict[str, str]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        url = f"{self._base_url}/rest/v1/{table}"
        logger.debug("postgrest_request", method=method, table=table)
        return await send_request(
            self._client,
            method,
            url,
            timeout=self._timeout,
            headers=self._headers(headers),
            **kwargs,
        )

    @staticmethod
    def _rows(response: httpx.Response) -> Optional[list[dict[str, Any]]]:
        if not response.content:
            return None
        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteError("Malformed JSON payload", status=response.status_code) from exc
        if payload is None:
            return None
        if isinstance(payload, dict):
            return [payload]
        return list(payload)
