"""In-memory adapters for the application-layer ports.

``InMemoryTableStore`` stands in for the PostgREST client (reads, counts,
filtered reads and writes) and ``InMemoryAuthAdmin`` for the GoTrue admin
endpoints. Both are used for wiring validation and tests.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from domain.exceptions import EmptyResultError, FetchError, RemoteError
from domain.models.query import PageQuery

logger = logging.getLogger(__name__)


def _coerce(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


def _matches(row: dict[str, Any], filters: Sequence[tuple[str, str]]) -> bool:
    """Evaluate PostgREST ``eq``/``neq``/``gte``/``lte``/``gt``/``lt`` filters."""
    for column, expression in filters:
        operator, _, operand = expression.partition(".")
        actual = row.get(column)
        if operator == "eq":
            if str(actual) != operand:
                return False
            continue
        if operator == "neq":
            if str(actual) == operand:
                return False
            continue
        left, right = _coerce(actual), _coerce(operand)
        try:
            ok = {
                "gte": lambda: left >= right,
                "lte": lambda: left <= right,
                "gt": lambda: left > right,
                "lt": lambda: left < right,
            }[operator]()
        except KeyError as exc:
            raise RemoteError(f"Unsupported filter operator: {operator}", status=400) from exc
        except TypeError:
            return False
        if not ok:
            return False
    return True


# ---------------------------------------------------------------------------
# Table store (TableReader, TableWriter, RecordStore)
# ---------------------------------------------------------------------------

class InMemoryTableStore:
    """Dict-of-lists table store with scriptable failures.

    ``fail_next(n, error)`` makes the next *n* ``select`` calls raise;
    ``gate`` (when set) holds every ``select`` until the event fires.
    """

    def __init__(self, tables: Optional[dict[str, list[dict[str, Any]]]] = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.queries: list[PageQuery] = []
        self.count_calls: int = 0
        self.gate: Optional[asyncio.Event] = None
        self.empty_payload: bool = False
        self.count_error: Optional[FetchError] = None
        self.write_error: Optional[FetchError] = None
        self._failures: list[FetchError] = []
        self._ids = itertools.count(1)

    def fail_next(self, times: int, error: Optional[FetchError] = None) -> None:
        failure = error or RemoteError("permission denied for table", status=401, code="42501")
        self._failures.extend([failure] * times)

    # -- reads -------------------------------------------------------------

    async def select(self, query: PageQuery) -> Optional[list[dict[str, Any]]]:
        self.queries.append(query)
        if self.gate is not None:
            await self.gate.wait()
        if self._failures:
            raise self._failures.pop(0)
        if self.empty_payload:
            return None
        rows = [r for r in self.tables.get(query.table, []) if _matches(r, query.filters)]
        return [dict(r) for r in rows[query.offset : query.offset + query.limit]]

    async def count(self, table: str, filters: Sequence[tuple[str, str]] = ()) -> int:
        self.count_calls += 1
        if self.count_error is not None:
            raise self.count_error
        return sum(1 for r in self.tables.get(table, []) if _matches(r, filters))

    async def select_where(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[tuple[str, str]] = (),
    ) -> list[dict[str, Any]]:
        if self.empty_payload:
            raise EmptyResultError(table)
        rows = [dict(r) for r in self.tables.get(table, []) if _matches(r, filters)]
        if columns == "*":
            return rows
        wanted = [c.strip() for c in columns.split(",")]
        return [{c: r.get(c) for c in wanted} for r in rows]

    # -- writes ------------------------------------------------------------

    async def insert(self, table: str, values: dict[str, Any]) -> list[dict[str, Any]]:
        self._raise_write_error()
        row = dict(values)
        row.setdefault("id", str(next(self._ids)))
        self.tables.setdefault(table, []).append(row)
        return [dict(row)]

    async def update(
        self, table: str, key: str, value: Any, changes: dict[str, Any]
    ) -> list[dict[str, Any]]:
        self._raise_write_error()
        updated = []
        for row in self.tables.get(table, []):
            if str(row.get(key)) == str(value):
                row.update(changes)
                updated.append(dict(row))
        return updated

    async def delete(self, table: str, key: str, value: Any) -> None:
        self._raise_write_error()
        rows = self.tables.get(table, [])
        self.tables[table] = [r for r in rows if str(r.get(key)) != str(value)]

    def _raise_write_error(self) -> None:
        if self.write_error is not None:
            raise self.write_error


# ---------------------------------------------------------------------------
# Auth admin
# ---------------------------------------------------------------------------

class InMemoryAuthAdmin:
    """Records invitations instead of sending e-mail."""

    def __init__(self, error: Optional[FetchError] = None) -> None:
        self.invitations: list[tuple[str, dict[str, Any]]] = []
        self.error = error

    async def invite_user_by_email(self, email: str, data: dict[str, Any]) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        self.invitations.append((email, dict(data)))
        logger.info("Recorded invitation for %s", email)
        return {"id": f"user-{len(self.invitations)}", "email": email, "user_metadata": dict(data)}
