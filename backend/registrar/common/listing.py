import math
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Query

T = TypeVar("T")

# Highest BMP private-use code point; the range [term, term + U+F8FF]
# covers every string that starts with term.
PREFIX_RANGE_END = "\uf8ff"


@dataclass
class Page(Generic[T]):
    items: List[T]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)


def total_pages(total: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return math.ceil(total / page_size)


def paginate(items: Sequence[T], page: int = 1, page_size: int = 10) -> Page[T]:
    """
    Slice one page out of an already filtered sequence.

    Pages are 1-based. A page past the end is empty rather than an error, so
    concatenating pages 1..total_pages gives back ``items`` unchanged.
    """
    if page < 1:
        raise ValueError("page must be 1 or greater")
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    start = (page - 1) * page_size
    return Page(items=list(items[start:start + page_size]), page=page, page_size=page_size, total=len(items))


def paginate_query(query: Query, page: int = 1, page_size: int = 10) -> Page:
    """Offset pagination pushed down to the database, with an exact total."""
    if page < 1:
        raise ValueError("page must be 1 or greater")
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    total = query.order_by(None).count()
    items = query.offset((page - 1) * page_size).limit(page_size).all()
    return Page(items=items, page=page, page_size=page_size, total=total)


def prefix_range(query: Query, column, term: str) -> Query:
    """
    Case-insensitive prefix search as a range scan on one column.

    The query is ordered by the searched column, so a search can never be
    combined with newest-first ordering.
    """
    needle = term.strip().lower()
    lowered = func.lower(column)
    return query.filter(lowered >= needle, lowered <= needle + PREFIX_RANGE_END).order_by(column.asc())


def contains_text(value: Optional[str], term: str) -> bool:
    if not term.strip():
        return True
    return term.strip().lower() in (value or "").lower()


def distinct_values(items: Iterable[Any], key: Callable[[Any], Optional[str]]) -> List[str]:
    """Unique, non-empty values in first-seen order (drives filter dropdowns)."""
    seen: List[str] = []
    for item in items:
        value = key(item)
        if value and value not in seen:
            seen.append(value)
    return seen
