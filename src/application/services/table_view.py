"""Page-level binding of a :class:`TableLoader` to row mutations.

``TableView`` never edits its rows speculatively: a create, update or delete is
sent to the remote table, and only a confirmed success triggers the loader's
forced refresh. Failures become a user-visible :class:`Notice`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, Protocol, TypeVar

from domain.exceptions import FetchError
from domain.models.page_state import PageState

from application.loading.table_loader import TableLoader

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------

class TableWriter(Protocol):
    """Port: row mutations by primary key."""

    async def insert(self, table: str, values: dict[str, Any]) -> list[dict[str, Any]]: ...

    async def update(
        self, table: str, key: str, value: Any, changes: dict[str, Any]
    ) -> list[dict[str, Any]]: ...

    async def delete(self, table: str, key: str, value: Any) -> None: ...


# ---------------------------------------------------------------------------
# View models
# ---------------------------------------------------------------------------

class BannerKind(enum.Enum):
    PANEL = "PANEL"
    INLINE = "INLINE"


@dataclass(frozen=True)
class ErrorBanner:
    """How a load failure is presented: a full panel or an inline message."""

    kind: BannerKind
    message: str


@dataclass(frozen=True)
class Notice:
    level: str
    message: str


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------

class TableView(Generic[T]):
    """Binds a loader's state to tabular output and row-level mutations."""

    def __init__(
        self,
        loader: TableLoader[T],
        writer: TableWriter,
        primary_key: str = "id",
    ) -> None:
        self._loader = loader
        self._writer = writer
        self._primary_key = primary_key
        self.notice: Optional[Notice] = None

    @property
    def loader(self) -> TableLoader[T]:
        return self._loader

    @property
    def state(self) -> PageState[T]:
        return self._loader.state

    @property
    def table(self) -> str:
        return self._loader.descriptor.table

    # -- presentation ------------------------------------------------------

    def error_banner(self) -> Optional[ErrorBanner]:
        """Page-1 failures get a full panel; later pages an inline message."""
        state = self.state
        if state.error is None:
            return None
        if state.failed_page is None or state.failed_page <= 1:
            return ErrorBanner(kind=BannerKind.PANEL, message=state.error)
        return ErrorBanner(kind=BannerKind.INLINE, message=state.error)

    def search(self, term: str, fields: Iterable[str]) -> list[T]:
        """Case-insensitive substring filter over the rows loaded so far."""
        needle = term.strip().lower()
        if not needle:
            return list(self.state.items)
        names = tuple(fields)
        return [row for row in self.state.items if any(needle in _text(row, f) for f in names)]

    async def retry(self) -> None:
        self._loader.refresh()
        await self._loader.wait_idle()

    async def load_more(self) -> bool:
        started = self._loader.load_more()
        if started:
            await self._loader.wait_idle()
        return started

    # -- mutations ---------------------------------------------------------

    async def create(self, values: dict[str, Any]) -> bool:
        return await self._mutate("create", self._writer.insert(self.table, values))

    async def update(self, record_id: Any, changes: dict[str, Any]) -> bool:
        return await self._mutate(
            "update", self._writer.update(self.table, self._primary_key, record_id, changes)
        )

    async def delete(self, record_id: Any) -> bool:
        return await self._mutate(
            "delete", self._writer.delete(self.table, self._primary_key, record_id)
        )

    async def _mutate(self, action: str, operation: Any) -> bool:
        try:
            await operation
        except FetchError as exc:
            logger.warning("%s on %s failed: %s", action, self.table, exc.detail)
            self.notice = Notice(level="error", message=f"Could not {action} record: {exc.detail}")
            return False

        logger.info("%s on %s succeeded; refreshing", action, self.table)
        self.notice = Notice(level="success", message=f"Record {action}d")
        self._loader.refresh()
        await self._loader.wait_idle()
        return True


def _text(row: Any, field: str) -> str:
    value = row.get(field) if isinstance(row, dict) else getattr(row, field, None)
    return str(value).lower() if value is not None else ""
