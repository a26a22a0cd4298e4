"""Helpers for reading whole result sets through Protean's paged DAO queries."""

from collections.abc import Iterator
from typing import Any

DEFAULT_BATCH_SIZE = 100


def fetch_all(query, batch_size: int = DEFAULT_BATCH_SIZE) -> Iterator[Any]:
    """Yield every record matched by ``query``, walking it page by page.

    Protean caps an unqualified ``all()`` at the query's default limit, so
    listings that must see every row page through with offset/limit instead.
    """
    offset = 0
    while True:
        result = query.offset(offset).limit(batch_size).all()
        yield from result.items
        offset += batch_size
        if not result.items or offset >= result.total:
            break


def paginate(records: list, page: int, limit: int) -> tuple[list, int, int]:
    """Slice ``records`` for a 1-based page, returning ``(page_items, total, total_pages)``."""
    page = max(page, 1)
    limit = max(limit, 1)
    total = len(records)
    total_pages = (total + limit - 1) // limit
    start = (page - 1) * limit
    return records[start : start + limit], total, total_pages
