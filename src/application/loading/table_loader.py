"""Stateful, paginated loader for one table view.

``TableLoader`` owns the :class:`PageState` of a single table and decides when
to (re)fetch it. Forced fetches (mount, refresh, navigation back to the
table's route, the tab becoming visible, connectivity returning) reset to page
one and supersede whatever is in flight. Non-forced fetches (``load_more``)
append the next page and are dropped while another fetch is running or
within the cool-down window after the last success.

Concurrency is handled purely by cancellation of the predecessor: every fetch
gets a fresh :class:`CancellationToken`, and a response is only committed if
its token is still the current one.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from domain.exceptions import FetchCancelledError, FetchError
from domain.models.page_state import LoaderPhase, PageState
from domain.models.query import QueryDescriptor
from infrastructure.observability.logging_config import get_logger

from application.loading.cancellation import CancellationToken
from application.loading.fetcher import PageFetcher, QueryTransform

logger = get_logger("recruit_backoffice.table_loader")

T = TypeVar("T")


@dataclass(frozen=True)
class LoaderPolicy:
    """Timing knobs for duplicate-trigger suppression (seconds)."""

    cooldown_seconds: float = 2.0
    mount_debounce_seconds: float = 0.3
    navigation_debounce_seconds: float = 0.3
    visibility_debounce_seconds: float = 0.5


class Debouncer:
    """At most one pending delayed callback per key."""

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Task[None]] = {}

    @property
    def pending(self) -> bool:
        return bool(self._pending)

    def schedule(self, key: str, delay: float, callback: Callable[[], Any]) -> None:
        self.cancel(key)
        self._pending[key] = asyncio.ensure_future(self._fire(key, delay, callback))

    def cancel(self, key: str) -> None:
        task = self._pending.pop(key, None)
        if task is not None and not task.done():
            task.cancel()

    def cancel_all(self) -> None:
        for key in list(self._pending):
            self.cancel(key)

    async def drain(self) -> None:
        while self._pending:
            await asyncio.wait(list(self._pending.values()))

    async def _fire(self, key: str, delay: float, callback: Callable[[], Any]) -> None:
        await asyncio.sleep(delay)
        self._pending.pop(key, None)
        callback()


class TableLoader(Generic[T]):
    """Owns page/accumulation state for one table view."""

    def __init__(
        self,
        fetcher: PageFetcher,
        descriptor: QueryDescriptor,
        *,
        policy: Optional[LoaderPolicy] = None,
        row_factory: Optional[Callable[[dict[str, Any]], T]] = None,
        transform: Optional[QueryTransform] = None,
        clock: Callable[[], float] = time.monotonic,
        on_change: Optional[Callable[[PageState[T]], None]] = None,
    ) -> None:
        self._fetcher = fetcher
        self._descriptor = descriptor
        self._policy = policy or LoaderPolicy()
        self._row_factory: Callable[[dict[str, Any]], Any] = row_factory or (lambda row: row)
        self._transform = transform
        self._clock = clock
        self._on_change = on_change

        self.state: PageState[T] = PageState()
        self._token: Optional[CancellationToken] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._last_success: Optional[float] = None
        self._path: Optional[str] = None
        self._closed = False
        self._debouncer = Debouncer()
        self._log = logger.bind(table=descriptor.table)

    @property
    def descriptor(self) -> QueryDescriptor:
        return self._descriptor

    @property
    def in_flight(self) -> bool:
        return self._token is not None

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TableLoader[T]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def mount(self, path: Optional[str] = None) -> None:
        """Start with a clean state and schedule the initial forced fetch."""
        self._path = path
        self._last_success = None
        if self._token is not None:
            self._token.cancel("remount")
            self._token = None
        self.state.reset()
        self._debouncer.schedule(
            "mount",
            self._policy.mount_debounce_seconds,
            lambda: self._request(force=True, reason="mount"),
        )

    async def close(self) -> None:
        """Cancel the pending request and clear timers; idempotent."""
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel_all()
        if self._token is not None:
            self._token.cancel("teardown")
            self._token = None
            self.state.loading = False
            self.state.phase = LoaderPhase.CANCELLED
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._log.debug("loader_closed")

    async def wait_idle(self) -> None:
        """Wait until no debounce timer is pending and no fetch is running."""
        while True:
            await self._debouncer.drain()
            task = self._task
            if task is not None and not task.done():
                await asyncio.wait({task})
                continue
            if not self._debouncer.pending:
                return

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def refresh(self) -> Optional[asyncio.Task[None]]:
        return self._request(force=True, reason="refresh")

    def load_more(self) -> bool:
        """Request the next page; returns whether a fetch was started."""
        if self.state.loading or not self.state.has_more or self._last_success is None:
            return False
        task = self._request(force=False, reason="load_more", page=self.state.page + 1)
        return task is not None

    def on_route_change(self, path: str) -> None:
        previous, self._path = self._path, path
        if previous is None or self._descriptor.owns_route(previous):
            return
        if self._descriptor.owns_route(path):
            self._debouncer.schedule(
                "navigation",
                self._policy.navigation_debounce_seconds,
                lambda: self._request(force=True, reason="navigation"),
            )

    def on_visibility_change(self, visible: bool) -> None:
        if visible and self._descriptor.owns_route(self._path):
            self._debouncer.schedule(
                "visibility",
                self._policy.visibility_debounce_seconds,
                lambda: self._request(force=True, reason="visibility"),
            )

    def on_online(self) -> None:
        self._request(force=True, reason="online")

    # ------------------------------------------------------------------
    # Fetch pipeline
    # ------------------------------------------------------------------

    def _in_cooldown(self) -> bool:
        if self._last_success is None:
            return False
        return self._clock() - self._last_success < self._policy.cooldown_seconds

    def _request(self, *, force: bool, reason: str, page: int = 1) -> Optional[asyncio.Task[None]]:
        if self._closed:
            return None
        if not force:
            if self.in_flight:
                self._log.debug("fetch_suppressed", reason=reason, cause="in_flight")
                return None
            if self._in_cooldown():
                self._log.debug("fetch_suppressed", reason=reason, cause="cooldown")
                return None
        else:
            # A forced fetch makes every pending forced trigger redundant.
            self._debouncer.cancel_all()

        if self._token is not None:
            self._token.cancel("superseded")
        token = CancellationToken()
        self._token = token

        target = 1 if force else page
        self.state.begin(target)
        self._notify()
        self._task = asyncio.ensure_future(self._run(token, target, force, reason))
        return self._task

    async def _run(self, token: CancellationToken, page: int, force: bool, reason: str) -> None:
        log = self._log.bind(page=page, forced=force, reason=reason, token=token.id)
        try:
            if force or self.state.total_count is None:
                self._set_phase(token, LoaderPhase.COUNT_FETCHING)
                total = await self._fetcher.fetch_count(self._descriptor, token)
                if not self._is_current(token):
                    return
                self.state.total_count = total
            self._set_phase(token, LoaderPhase.PAGE_FETCHING)
            rows = await self._fetcher.fetch_page(self._descriptor, page, token, self._transform)
            items = [self._row_factory(row) for row in rows]
        except FetchCancelledError:
            log.debug("fetch_cancelled", cause=token.reason)
            return
        except FetchError as exc:
            if self._is_current(token):
                log.warning("fetch_failed", error=str(exc), kind=type(exc).__name__)
                self._fail(token, page, exc)
            return
        except Exception as exc:
            if self._is_current(token):
                log.exception("fetch_crashed")
                self._fail(token, page, exc)
            return

        if not self._is_current(token):
            log.debug("stale_response_discarded")
            return
        self.state.commit_page(items, page, self._descriptor.page_size, replace=page == 1)
        self._last_success = self._clock()
        self._token = None
        log.info("page_committed", rows=len(items), total=self.state.total_count, has_more=self.state.has_more)
        self._notify()

    def _fail(self, token: CancellationToken, page: int, exc: Exception) -> None:
        self.state.fail(page, exc)
        if page == 1:
            self._last_success = None
        if self._token is token:
            self._token = None
        self._notify()

    def _is_current(self, token: CancellationToken) -> bool:
        return self._token is token and not token.cancelled

    def _set_phase(self, token: CancellationToken, phase: LoaderPhase) -> None:
        if self._is_current(token):
            self.state.phase = phase
            self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.state)
