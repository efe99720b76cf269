"""
Bounded, cancellable reads against a remote table endpoint.

``PageFetcher`` issues one paginated read with a per-attempt timeout, a
fixed number of attempts and linear backoff. It owns no state beyond its
configuration: the caller decides what to do with the rows it returns.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence, TypeVar

from domain.exceptions import (
    EmptyResultError,
    FetchCancelledError,
    FetchError,
    FetchTimeoutError,
)
from domain.models.query import PageQuery, QueryDescriptor
from infrastructure.observability.logging_config import get_logger
from infrastructure.observability.metrics import (
    table_fetch_attempts_total,
    table_fetch_duration_seconds,
)

from application.loading.cancellation import CancellationToken
from application.schemas.pagination import PaginationParams

logger = get_logger("recruit_backoffice.fetcher")

R = TypeVar("R")

QueryTransform = Callable[[PageQuery], PageQuery]


class TableReader(Protocol):
    """Port: read access to a table-oriented query endpoint."""

    async def select(self, query: PageQuery) -> Optional[list[dict[str, Any]]]: ...

    async def count(self, table: str, filters: Sequence[tuple[str, str]] = ()) -> int: ...


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff_seconds: float = 1.0
    timeout_seconds: float = 15.0

    def backoff_for(self, attempt: int) -> float:
        """Delay before retrying after failed *attempt* (1-based)."""
        return attempt * self.backoff_seconds


class PageFetcher:
    """Fetch/retry primitive shared by every table loader."""

    def __init__(self, reader: TableReader, policy: Optional[RetryPolicy] = None) -> None:
        self._reader = reader
        self._policy = policy or RetryPolicy()

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_query(
        self,
        descriptor: QueryDescriptor,
        page: int,
        transform: Optional[QueryTransform] = None,
    ) -> PageQuery:
        params = PaginationParams(page=page, size=descriptor.page_size)
        query = PageQuery(
            table=descriptor.table,
            select=descriptor.select,
            order=descriptor.order,
            offset=params.offset,
            limit=params.limit,
            filters=descriptor.filters,
        )
        return transform(query) if transform else query

    async def fetch_page(
        self,
        descriptor: QueryDescriptor,
        page: int,
        token: CancellationToken,
        transform: Optional[QueryTransform] = None,
    ) -> list[dict[str, Any]]:
        """Read one page of *descriptor*, retrying transient failures.

        Raises ``FetchCancelledError`` as soon as *token* fires; otherwise the
        last ``FetchError`` once every attempt has failed.
        """
        query = self.build_query(descriptor, page, transform)
        log = logger.bind(table=query.table, page=page, offset=query.offset, limit=query.limit)
        last_error: Optional[FetchError] = None

        for attempt in range(1, self._policy.max_attempts + 1):
            token.raise_if_cancelled()
            log.debug("fetch_attempt", attempt=attempt, max_attempts=self._policy.max_attempts)
            start = time.perf_counter()
            try:
                rows = await self._race(lambda: self._reader.select(query), token)
                if rows is None:
                    raise EmptyResultError(query.table)
            except FetchCancelledError:
                table_fetch_attempts_total.labels(table=query.table, outcome="cancelled").inc()
                raise
            except FetchError as exc:
                last_error = exc
                table_fetch_attempts_total.labels(table=query.table, outcome=type(exc).__name__).inc()
                if token.cancelled:
                    raise FetchCancelledError(token.reason or "superseded") from exc
                if attempt == self._policy.max_attempts:
                    break
                log.warning("fetch_attempt_failed", attempt=attempt, error=str(exc))
                if await token.sleep(self._policy.backoff_for(attempt)):
                    raise FetchCancelledError(token.reason or "superseded") from exc
                continue

            table_fetch_attempts_total.labels(table=query.table, outcome="success").inc()
            table_fetch_duration_seconds.labels(table=query.table).observe(time.perf_counter() - start)
            log.debug("fetch_succeeded", attempt=attempt, rows=len(rows))
            return rows

        assert last_error is not None
        log.error("fetch_failed", attempts=self._policy.max_attempts, error=str(last_error))
        raise last_error

    async def fetch_count(self, descriptor: QueryDescriptor, token: CancellationToken) -> int:
        """Best-effort exact row count; any failure other than cancellation yields 0."""
        token.raise_if_cancelled()
        try:
            return await self._race(
                lambda: self._reader.count(descriptor.table, descriptor.filters), token
            )
        except FetchCancelledError:
            raise
        except FetchError as exc:
            if token.cancelled:
                raise FetchCancelledError(token.reason or "superseded") from exc
            logger.warning("count_failed", table=descriptor.table, error=str(exc))
            return 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _race(self, call: Callable[[], Awaitable[R]], token: CancellationToken) -> R:
        """Run *call* against the attempt timeout and the cancellation token."""
        request = asyncio.ensure_future(call())
        cancelled = asyncio.ensure_future(token.wait())
        try:
            done, _ = await asyncio.wait(
                {request, cancelled},
                timeout=self._policy.timeout_seconds,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            request.cancel()
            raise
        finally:
            cancelled.cancel()

        if request in done:
            return request.result()

        request.cancel()
        if token.cancelled:
            raise FetchCancelledError(token.reason or "superseded")
        raise FetchTimeoutError(self._policy.timeout_seconds)
