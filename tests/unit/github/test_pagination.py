"""Unit tests for cursor pagination."""

import pytest

from projsync.github import Page, paginate


@pytest.mark.unit
class TestPaginate:
    """Tests for paginate."""

    def test_single_page(self) -> None:
        calls: list[str | None] = []

        def fetch(cursor: str | None) -> Page[int]:
            calls.append(cursor)
            return Page(items=[1, 2], has_more=False)

        assert paginate(fetch) == [1, 2]
        assert calls == [None]

    def test_follows_cursors_in_order(self) -> None:
        pages = {
            None: Page(items=["a"], has_more=True, next_cursor="c1"),
            "c1": Page(items=["b", "c"], has_more=True, next_cursor="c2"),
            "c2": Page(items=["d"], has_more=False, next_cursor="c3"),
        }
        calls: list[str | None] = []

        def fetch(cursor: str | None) -> Page[str]:
            calls.append(cursor)
            return pages[cursor]

        assert paginate(fetch) == ["a", "b", "c", "d"]
        assert calls == [None, "c1", "c2"]

    def test_empty_listing(self) -> None:
        assert paginate(lambda cursor: Page(items=[], has_more=False)) == []


@pytest.mark.unit
class TestPageFromConnection:
    def test_reads_page_info(self) -> None:
        page = Page.from_connection(
            {"nodes": [{"id": 1}], "pageInfo": {"hasNextPage": True, "endCursor": "xyz"}}
        )

        assert page.items == [{"id": 1}]
        assert page.has_more is True
        assert page.next_cursor == "xyz"

    def test_missing_page_info_is_last_page(self) -> None:
        page = Page.from_connection({"nodes": []})

        assert page.has_more is False
