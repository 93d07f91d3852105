"""Cursor pagination over GitHub GraphQL connections."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a cursor-paginated listing."""

    items: Sequence[T]
    has_more: bool
    next_cursor: str | None = None

    @classmethod
    def from_connection(cls, connection: dict[str, Any]) -> Page[Any]:
        """Build a page from a GraphQL connection with nodes and pageInfo."""
        page_info = connection.get("pageInfo") or {}
        return cls(
            items=connection.get("nodes") or [],
            has_more=bool(page_info.get("hasNextPage")),
            next_cursor=page_info.get("endCursor"),
        )


def paginate(fetch_page: Callable[[str | None], Page[T]]) -> list[T]:
    """Drain a paginated listing into a single list.

    `fetch_page` is called with None first, then with each returned cursor,
    until a page reports `has_more=False`. There is no page limit: a server
    that never reports the last page keeps this looping.
    """
    items: list[T] = []
    cursor: str | None = None
    while True:
        page = fetch_page(cursor)
        items.extend(page.items)
        if not page.has_more:
            return items
        cursor = page.next_cursor
