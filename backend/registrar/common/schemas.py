from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel

from registrar.common.listing import Page

ItemT = TypeVar("ItemT")


class PageResponse(BaseModel, Generic[ItemT]):
    items: List[ItemT]
    page: int
    page_size: int
    total: int
    total_pages: int
    # Echo of the search that produced this page, so a client can drop
    # responses to queries it has already replaced
    search: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def from_page(cls, page: Page, items: List[ItemT], search: Optional[str] = None, field: Optional[str] = None):
        return cls(
            items=items,
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            total_pages=page.total_pages,
            search=search,
            field=field,
        )
