"""
Display slicing for the dashboard grid.
"""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, TypeVar


T = TypeVar("T")

DEFAULT_PAGE_SIZE = 24
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the numbers needed to render paging."""
    items: List[T] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total: int = 0

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 1
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        """Paging metadata, without the items."""
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total": self.total,
            "total_pages": self.total_pages,
            "has_next": self.has_next,
            "has_previous": self.has_previous,
        }


def paginate(
    items: Sequence[T],
    page: Optional[int] = 1,
    page_size: Optional[int] = None,
    max_page_size: int = MAX_PAGE_SIZE,
) -> Page[T]:
    """
    Slice ``items`` into the requested page.

    Non-positive or missing values fall back to page 1 and the default
    size, the size is capped at ``max_page_size`` and a page past the end
    clamps to the last page.
    """
    if page_size is None or page_size <= 0:
        page_size = DEFAULT_PAGE_SIZE
    page_size = min(page_size, max(1, max_page_size))

    total = len(items)
    last_page = max(1, (total + page_size - 1) // page_size)
    if page is None or page <= 0:
        page = 1
    page = min(page, last_page)

    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total=total,
    )
