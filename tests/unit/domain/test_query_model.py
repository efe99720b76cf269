"""Tests for domain.models.query."""

from __future__ import annotations

import pytest

from domain.models.query import MAX_PAGE_SIZE, OrderSpec, PageQuery, QueryDescriptor


class TestOrderSpec:
    def test_default_is_newest_first(self) -> None:
        assert OrderSpec().to_param() == "created_at.desc"

    def test_ascending(self) -> None:
        assert OrderSpec("name", ascending=True).to_param() == "name.asc"


class TestQueryDescriptor:
    def test_defaults(self) -> None:
        d = QueryDescriptor(table="candidates")
        assert d.select == "*"
        assert d.page_size == 20
        assert d.filters == ()

    def test_empty_table_rejected(self) -> None:
        with pytest.raises(ValueError):
            QueryDescriptor(table="")

    def test_non_positive_page_size_rejected(self) -> None:
        with pytest.raises(ValueError):
            QueryDescriptor(table="jobs", page_size=0)

    def test_page_size_above_server_row_cap_rejected(self) -> None:
        assert QueryDescriptor(table="jobs", page_size=MAX_PAGE_SIZE).page_size == MAX_PAGE_SIZE
        with pytest.raises(ValueError):
            QueryDescriptor(table="jobs", page_size=MAX_PAGE_SIZE + 1)

    def test_is_immutable(self) -> None:
        d = QueryDescriptor(table="jobs")
        with pytest.raises(AttributeError):
            d.page_size = 50  # type: ignore[misc]

    @pytest.mark.parametrize(
        "path",
        ["/tables/jobs", "/tables/jobs/", "/tables/jobs?tab=open", "/tables/jobs#top"],
    )
    def test_owns_route_normalises_path(self, path: str) -> None:
        assert QueryDescriptor(table="jobs", route="/tables/jobs").owns_route(path)

    def test_does_not_own_other_route(self) -> None:
        d = QueryDescriptor(table="jobs", route="/tables/jobs")
        assert not d.owns_route("/tables/admin-jobs")
        assert not d.owns_route(None)

    def test_without_route_owns_nothing(self) -> None:
        assert not QueryDescriptor(table="jobs").owns_route("/tables/jobs")


class TestPageQuery:
    def test_to_params_order(self) -> None:
        q = PageQuery(
            table="jobs",
            select="id,position_title",
            order=OrderSpec("created_at"),
            offset=40,
            limit=20,
            filters=(("phase", "eq.Open"),),
        )
        assert q.to_params() == [
            ("select", "id,position_title"),
            ("order", "created_at.desc"),
            ("offset", "40"),
            ("limit", "20"),
            ("phase", "eq.Open"),
        ]
