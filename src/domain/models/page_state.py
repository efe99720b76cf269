from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


class LoaderPhase(enum.Enum):
    IDLE = "IDLE"
    COUNT_FETCHING = "COUNT_FETCHING"
    PAGE_FETCHING = "PAGE_FETCHING"
    ERROR = "ERROR"
    CANCELLED = "CANCELLED"


@dataclass
class PageState(Generic[T]):
    """Mutable, loader-owned view of one paginated table."""

    items: List[T] = field(default_factory=list)
    page: int = 1
    loading: bool = False
    error: Optional[str] = None
    error_kind: Optional[str] = None
    failed_page: Optional[int] = None
    has_more: bool = True
    total_count: Optional[int] = None
    phase: LoaderPhase = LoaderPhase.IDLE

    def begin(self, page: int) -> None:
        self.page = page
        self.loading = True
        self.error = None
        self.error_kind = None
        self.failed_page = None

    def commit_page(self, rows: Sequence[T], page: int, page_size: int, *, replace: bool) -> None:
        if replace:
            self.items = list(rows)
        else:
            self.items.extend(rows)
        self.page = page
        self.has_more = len(rows) == page_size
        self.loading = False
        self.phase = LoaderPhase.IDLE

    def fail(self, page: int, error: Exception) -> None:
        """Record a terminal failure for *page*.

        Page 1 drops the stale rows and closes pagination until a page-1 fetch
        succeeds; later pages keep what is already shown and step back so the
        same page can be requested again.
        """
        self.error = str(error)
        self.error_kind = type(error).__name__
        self.failed_page = page
        self.loading = False
        self.phase = LoaderPhase.ERROR
        if page <= 1:
            self.items = []
            self.page = 1
            self.has_more = False
        else:
            self.page = page - 1

    def reset(self) -> None:
        self.items = []
        self.page = 1
        self.loading = False
        self.error = None
        self.error_kind = None
        self.failed_page = None
        self.has_more = True
        self.total_count = None
        self.phase = LoaderPhase.IDLE
