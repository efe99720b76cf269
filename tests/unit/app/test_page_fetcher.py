"""Unit tests for PageFetcher: retries, timeouts and cancellation."""

from __future__ import annotations

import asyncio

import pytest

from application.loading.cancellation import CancellationToken
from application.loading.fetcher import PageFetcher, RetryPolicy
from domain.exceptions import (
    EmptyResultError,
    FetchCancelledError,
    FetchTimeoutError,
    NetworkOfflineError,
    RemoteError,
)
from domain.models.query import PageQuery


class _SlowReader:
    """Never answers within a short timeout."""

    def __init__(self) -> None:
        self.calls = 0

    async def select(self, query):
        self.calls += 1
        await asyncio.sleep(10)
        return []

    async def count(self, table, filters=()):
        await asyncio.sleep(10)
        return 0


class TestRetryPolicy:
    def test_linear_backoff(self) -> None:
        policy = RetryPolicy(backoff_seconds=1.0)
        assert policy.backoff_for(1) == 1.0
        assert policy.backoff_for(2) == 2.0

    def test_defaults(self) -> None:
        policy = RetryPolicy()
        assert (policy.max_attempts, policy.timeout_seconds) == (3, 15.0)


class TestBuildQuery:
    def test_page_to_offset(self, fetcher, descriptor) -> None:
        q = fetcher.build_query(descriptor, 3)
        assert (q.offset, q.limit) == (40, 20)
        assert q.order.to_param() == "name.asc"

    def test_transform_is_applied(self, fetcher, descriptor) -> None:
        def only_acme(query: PageQuery) -> PageQuery:
            return PageQuery(
                query.table, query.select, query.order, query.offset, query.limit,
                filters=(("client_name", "eq.Acme"),),
            )

        assert fetcher.build_query(descriptor, 1, only_acme).filters == (("client_name", "eq.Acme"),)


@pytest.mark.asyncio
class TestFetchPage:
    async def test_returns_requested_slice(self, fetcher, descriptor) -> None:
        rows = await fetcher.fetch_page(descriptor, 3, CancellationToken())
        assert [r["id"] for r in rows] == [f"hr-{i:03d}" for i in range(40, 45)]

    async def test_retries_transient_failures(self, fetcher, store, descriptor) -> None:
        store.fail_next(2)
        rows = await fetcher.fetch_page(descriptor, 1, CancellationToken())
        assert len(rows) == 20
        assert len(store.queries) == 3

    async def test_raises_last_error_after_max_attempts(self, fetcher, store, descriptor) -> None:
        store.fail_next(2, NetworkOfflineError("dns"))
        store.fail_next(1, RemoteError("permission denied", status=401))
        with pytest.raises(RemoteError, match="permission denied"):
            await fetcher.fetch_page(descriptor, 1, CancellationToken())
        assert len(store.queries) == 3

    async def test_missing_payload_is_empty_result(self, fetcher, store, descriptor) -> None:
        store.empty_payload = True
        with pytest.raises(EmptyResultError):
            await fetcher.fetch_page(descriptor, 1, CancellationToken())
        assert len(store.queries) == 3

    async def test_timeout_per_attempt(self, descriptor) -> None:
        reader = _SlowReader()
        fetcher = PageFetcher(reader, RetryPolicy(max_attempts=2, backoff_seconds=0, timeout_seconds=0.05))
        with pytest.raises(FetchTimeoutError):
            await fetcher.fetch_page(descriptor, 1, CancellationToken())
        assert reader.calls == 2

    async def test_cancelled_token_issues_no_request(self, fetcher, store, descriptor) -> None:
        token = CancellationToken()
        token.cancel("teardown")
        with pytest.raises(FetchCancelledError):
            await fetcher.fetch_page(descriptor, 1, token)
        assert store.queries == []

    async def test_cancel_during_request_is_not_retried(self, fetcher, store, descriptor) -> None:
        store.gate = asyncio.Event()
        token = CancellationToken()
        task = asyncio.ensure_future(fetcher.fetch_page(descriptor, 1, token))
        await asyncio.sleep(0.01)
        token.cancel()
        with pytest.raises(FetchCancelledError):
            await task
        assert len(store.queries) == 1

    async def test_cancel_during_backoff(self, store, descriptor) -> None:
        fetcher = PageFetcher(store, RetryPolicy(max_attempts=3, backoff_seconds=10, timeout_seconds=1))
        store.fail_next(3)
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.02, token.cancel)
        with pytest.raises(FetchCancelledError):
            await asyncio.wait_for(fetcher.fetch_page(descriptor, 1, token), timeout=2)
        assert len(store.queries) == 1


@pytest.mark.asyncio
class TestFetchCount:
    async def test_exact_count(self, fetcher, descriptor) -> None:
        assert await fetcher.fetch_count(descriptor, CancellationToken()) == 45

    async def test_failure_counts_as_zero(self, fetcher, store, descriptor) -> None:
        store.count_error = RemoteError("count failed", status=500)
        assert await fetcher.fetch_count(descriptor, CancellationToken()) == 0

    async def test_cancellation_propagates(self, fetcher, descriptor) -> None:
        token = CancellationToken()
        token.cancel()
        with pytest.raises(FetchCancelledError):
            await fetcher.fetch_count(descriptor, token)


@pytest.mark.asyncio
class TestCancellationToken:
    async def test_cancel_is_idempotent(self) -> None:
        token = CancellationToken()
        token.cancel("superseded")
        token.cancel("teardown")
        assert token.cancelled
        assert token.reason == "superseded"

    async def test_sleep_returns_true_when_cancelled(self) -> None:
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel)
        assert await token.sleep(5) is True

    async def test_sleep_elapses(self) -> None:
        assert await CancellationToken().sleep(0.01) is False

    async def test_tokens_have_distinct_ids(self) -> None:
        assert CancellationToken().id != CancellationToken().id
