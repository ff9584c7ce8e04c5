"""Paging helpers shared by catalogue and order queries.

Pages are zero-indexed. Protean querysets cap results per call, so full
scans walk the store in fixed-size batches.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from storefront.shared.errors import InvalidArgument

SCAN_BATCH_SIZE = 100
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Page:
    items: list[Any]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.size - 1) // self.size if self.size else 0

    @property
    def has_next(self) -> bool:
        return (self.page + 1) * self.size < self.total


def check_page_request(page: int, size: int) -> None:
    if page < 0:
        raise InvalidArgument("page must be zero or greater")
    if size < 1 or size > MAX_PAGE_SIZE:
        raise InvalidArgument(f"size must be between 1 and {MAX_PAGE_SIZE}")


def paginate(items: Sequence[Any], page: int, size: int) -> Page:
    check_page_request(page, size)
    start = page * size
    return Page(items=list(items[start : start + size]), total=len(items), page=page, size=size)


def scan(dao, **filters) -> Iterator[Any]:
    """Yield every record matching `filters`, batch by batch."""
    offset = 0
    while True:
        query = dao.query.filter(**filters) if filters else dao.query
        results = query.offset(offset).limit(SCAN_BATCH_SIZE).all()
        yield from results.items
        offset += SCAN_BATCH_SIZE
        if offset >= results.total:
            return
