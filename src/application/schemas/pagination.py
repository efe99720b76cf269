"""Pagination helpers for paginated list queries.

Provides a ``PaginationParams`` value object that turns a 1-based page
number into the ``offset`` / ``limit`` pair PostgREST expects.
"""

from __future__ import annotations

from dataclasses import dataclass

from domain.models.query import MAX_PAGE_SIZE

_DEFAULT_PAGE: int = 1
_DEFAULT_SIZE: int = 20


@dataclass(frozen=True)
class PaginationParams:
    """Immutable pagination request parameters.

    ``page`` is 1-based.  ``size`` is clamped to [1, ``MAX_PAGE_SIZE``].
    """

    page: int = _DEFAULT_PAGE
    size: int = _DEFAULT_SIZE

    def __post_init__(self) -> None:
        # frozen=True requires object.__setattr__ for validation fixups
        object.__setattr__(self, "page", max(1, self.page))
        object.__setattr__(self, "size", max(1, min(self.size, MAX_PAGE_SIZE)))

    @property
    def offset(self) -> int:
        """Zero-based offset of the first row on this page."""
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size
