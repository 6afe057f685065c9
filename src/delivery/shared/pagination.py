"""Page-based pagination over repository queries.

Pages are 1-indexed. A page response carries ``page``, ``limit``, ``total``
and ``total_pages`` only. When there are results, the requested page is
clamped to the last page.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from delivery.config import MAX_PAGE_LIMIT


@dataclass
class Page:
    items: list[Any] = field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


def clamp_limit(limit: int | None, default: int) -> int:
    if limit is None:
        return default
    return max(1, min(int(limit), MAX_PAGE_LIMIT))


def clamp_page(page: int | None) -> int:
    if page is None:
        return 1
    return max(1, int(page))


def fetch_page(repo, page: int | None, limit: int | None, default_limit: int, **filters) -> Page:
    """Fetch one page of aggregates matching ``filters``, newest first."""
    limit = clamp_limit(limit, default_limit)
    page = clamp_page(page)

    def _query(page_number):
        return (
            repo._dao.query.filter(**filters)
            .order_by("-created_at")
            .offset((page_number - 1) * limit)
            .limit(limit)
            .all()
        )

    result = _query(page)
    last_page = math.ceil(result.total / limit) if result.total else 0
    if result.total and page > last_page:
        page = last_page
        result = _query(page)

    return Page(items=list(result.items), page=page, limit=limit, total=result.total)


def page_of(items: list[Any], page: int | None, limit: int | None, default_limit: int) -> Page:
    """Paginate an already-materialized, already-ordered list."""
    limit = clamp_limit(limit, default_limit)
    page = clamp_page(page)
    total = len(items)
    if total:
        page = min(page, math.ceil(total / limit))
    start = (page - 1) * limit
    return Page(items=items[start : start + limit], page=page, limit=limit, total=total)
