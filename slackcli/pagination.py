"""Pagination walker for cursor- and page-number-based Slack endpoints.

A page fetcher is any callable ``fetch(cursor) -> Page``. The walker either
stops after the first page (``single``) or keeps following ``next_cursor``
until it is absent (``all``). Pages are concatenated in fetch order. An
exception from any page propagates unchanged; pages already fetched are
dropped with it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from slackcli.exceptions import CliError

SINGLE = "single"
ALL = "all"
POLICIES = (SINGLE, ALL)


@dataclass(frozen=True)
class Page:
    items: list[Any]
    next_cursor: Any = None


@dataclass
class PageResult:
    items: list[Any] = field(default_factory=list)
    next_cursor: Any = None
    pages: int = 0

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None


def walk(fetch: Callable[[Any], Page], policy: str = SINGLE, start: Any = None) -> PageResult:
    """Collect one page or every page, following ``next_cursor``."""
    if policy not in POLICIES:
        raise CliError(f"[ERROR] Invalid pagination policy '{policy}'. Use: {', '.join(POLICIES)}")
    result = PageResult()
    cursor = start
    while True:
        page = fetch(cursor)
        result.items.extend(page.items)
        result.pages += 1
        result.next_cursor = page.next_cursor
        if policy == SINGLE or page.next_cursor is None:
            return result
        cursor = page.next_cursor


def cursor_page(response: dict, key: str) -> Page:
    """Adapt a cursor-paginated response (``response_metadata.next_cursor``)."""
    meta = response.get("response_metadata") or {}
    return Page(items=list(response.get(key) or []), next_cursor=meta.get("next_cursor") or None)


def numbered_page(response: dict, key: str, container: str | None = None) -> Page:
    """Adapt a page-number response (``paging`` or ``pagination`` block).

    The "cursor" of a numbered endpoint is the next page number, absent on the
    last page.
    """
    body = (response.get(container) or {}) if container else response
    items = list(body.get(key) or [])
    paging = body.get("paging") or body.get("pagination") or response.get("paging") or {}
    page = int(paging.get("page") or 1)
    pages = int(paging.get("pages") or paging.get("page_count") or 1)
    return Page(items=items, next_cursor=page + 1 if page < pages else None)
