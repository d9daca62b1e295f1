"""Generic pagination types shared by all list endpoints.

Paginated[V]          -- plain dataclass handed to templates (items already view-mapped).
PaginatedResponse[T]  -- Pydantic model for the JSON list endpoints.
"""

from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

from brewlog.listing import Page, PageMath


@dataclass
class Paginated[V](PageMath):
    """A repository ``Page`` whose items went through a view constructor.

    Templates read the derived values (``total_pages``, ``has_next``,
    ``start_index`` ...) straight off this object::

        view_page = Paginated.from_page(page, RoasterView.from_model)
        view_page.has_next  # same arithmetic as page.has_next
    """

    items: list[V]
    page: int
    page_size: int
    total: int
    showing_all: bool

    def __post_init__(self) -> None:
        self.page = max(self.page, 1)
        self.page_size = max(self.page_size, 1)

    @classmethod
    def from_page[T](cls, page: Page[T], view_mapper: Callable[[T], V]) -> "Paginated[V]":
        return cls(
            items=[view_mapper(item) for item in page.items],
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            showing_all=page.showing_all,
        )

    def is_page_size(self, value: int) -> bool:
        return not self.showing_all and self.page_size == value

    @property
    def page_size_query_value(self) -> str:
        return "all" if self.showing_all else str(self.page_size)


class PaginatedResponse[T](BaseModel):
    """Pydantic model for paginated JSON responses.

    ``from_attributes`` lets ``model_validate`` read a ``Page`` or ``Paginated``
    directly, derived properties included::

        RoasterListResponse = PaginatedResponse[RoasterResponse]
        RoasterListResponse.model_validate(page)
    """

    model_config = {"from_attributes": True}

    items: list[T]
    page: int
    page_size: int
    total: int
    showing_all: bool
    total_pages: int
    has_previous: bool
    has_next: bool
