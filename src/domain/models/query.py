from __future__ import annotations

from dataclasses import dataclass, field

# PostgREST's default ``db-max-rows``; larger pages come back truncated.
MAX_PAGE_SIZE: int = 1000


def _normalise_path(path: str) -> str:
    path = path.split("?", 1)[0].split("#", 1)[0]
    return path.rstrip("/") or "/"


@dataclass(frozen=True)
class OrderSpec:
    column: str = "created_at"
    ascending: bool = False

    def to_param(self) -> str:
        """Render as a PostgREST ``order`` value, e.g. ``name.asc``."""
        return f"{self.column}.{'asc' if self.ascending else 'desc'}"


@dataclass(frozen=True)
class QueryDescriptor:
    """Immutable description of one table view's data source."""

    table: str
    select: str = "*"
    order: OrderSpec = field(default_factory=OrderSpec)
    page_size: int = 20
    route: str = ""
    filters: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        if not self.table:
            raise ValueError("table must not be empty")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

    def owns_route(self, path: str | None) -> bool:
        if not path or not self.route:
            return False
        return _normalise_path(path) == _normalise_path(self.route)


@dataclass(frozen=True)
class PageQuery:
    """One concrete ranged read against a table."""

    table: str
    select: str
    order: OrderSpec
    offset: int
    limit: int
    filters: tuple[tuple[str, str], ...] = ()

    def to_params(self) -> list[tuple[str, str]]:
        params = [
            ("select", self.select),
            ("order", self.order.to_param()),
            ("offset", str(self.offset)),
            ("limit", str(self.limit)),
        ]
        params.extend(self.filters)
        return params
