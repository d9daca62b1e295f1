"""Listing primitives shared by every list endpoint.

SortKey         -- capability protocol each entity's sort-key enum satisfies.
PageSize        -- a bounded page size or the "all" sentinel.
ListRequest[K]  -- normalized {page, page_size, sort_key, sort_direction}.
Page[T]         -- what a repository returns, with the pagination arithmetic.

Everything here is a request-scoped value type. Normalization happens at
construction, so a ListRequest can never hold an illegal combination.
"""

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Protocol, Self

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    def opposite(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC

    @classmethod
    def parse(cls, value: str) -> "SortDirection | None":
        """Case-insensitive ``asc``/``desc``; anything else is ``None``."""
        try:
            return cls(value.lower())
        except ValueError:
            return None


class SortKey(Protocol):
    """The four operations a per-entity sort-key set must provide.

    Implementations are closed enums (see ``schemas/roaster.py``). They do not
    inherit from this class; it only describes the shape::

        class RoasterSortKey(StrEnum):
            CREATED_AT = "created-at"
            NAME = "name"

            @classmethod
            def default(cls) -> "RoasterSortKey": ...
    """

    @classmethod
    def default(cls) -> Self: ...

    @classmethod
    def from_query(cls, value: str) -> Self | None: ...

    def query_value(self) -> str: ...

    def default_direction(self) -> SortDirection: ...


@dataclass(frozen=True)
class PageSize:
    """Either ``Limited(n)`` or ``All`` (``limit is None``).

    Construct through ``limited()`` / ``all()``. No range clamping happens
    here; that is ListRequest's job.
    """

    limit: int | None

    @classmethod
    def limited(cls, size: int) -> "PageSize":
        return cls(None) if size == 0 else cls(size)

    @classmethod
    def all(cls) -> "PageSize":
        return cls(None)

    @property
    def is_all(self) -> bool:
        return self.limit is None

    def as_option(self) -> int | None:
        return self.limit

    def to_query_value(self) -> str:
        return "all" if self.limit is None else str(self.limit)

    def __repr__(self) -> str:
        return "PageSize.All" if self.limit is None else f"PageSize.Limited({self.limit})"


def _normalize_page_size(page_size: PageSize) -> PageSize:
    if page_size.limit is None or page_size.limit == 0:
        return PageSize.all()
    return PageSize(min(max(page_size.limit, 1), MAX_PAGE_SIZE))


@dataclass(frozen=True)
class ListRequest[K: SortKey]:
    """A normalized list request.

    ``__post_init__`` clamps ``page`` to >= 1 and ``page_size`` into
    ``[1, MAX_PAGE_SIZE]`` (``Limited(0)`` becomes ``All``). Every ``with_*``
    method goes through ``dataclasses.replace``, which re-runs it.
    """

    page: int
    page_size: PageSize
    sort_key: K
    sort_direction: SortDirection

    def __post_init__(self) -> None:
        object.__setattr__(self, "page", max(self.page, 1))
        object.__setattr__(self, "page_size", _normalize_page_size(self.page_size))

    @classmethod
    def default_query(cls, key_type: type[K]) -> "ListRequest[K]":
        key = key_type.default()
        return cls(1, PageSize.limited(DEFAULT_PAGE_SIZE), key, key.default_direction())

    @classmethod
    def show_all(cls, sort_key: K, sort_direction: SortDirection) -> "ListRequest[K]":
        return cls(1, PageSize.all(), sort_key, sort_direction)

    @property
    def offset(self) -> int:
        if self.page_size.limit is None:
            return 0
        return (self.page - 1) * self.page_size.limit

    @property
    def limit(self) -> int | None:
        return self.page_size.limit

    def with_page(self, page: int) -> "ListRequest[K]":
        return replace(self, page=page)

    def with_page_size(self, page_size: PageSize) -> "ListRequest[K]":
        return replace(self, page_size=page_size)

    def with_sort(self, key: K) -> "ListRequest[K]":
        """Re-clicking the current key reverses it; a new key starts at its natural order."""
        if key == self.sort_key:
            direction = self.sort_direction.opposite()
        else:
            direction = key.default_direction()
        return replace(self, sort_key=key, sort_direction=direction)

    def with_sort_and_direction(self, key: K, direction: SortDirection) -> "ListRequest[K]":
        return replace(self, sort_key=key, sort_direction=direction)

    def ensure_page_within(self, total: int) -> "ListRequest[K]":
        """Clamp ``page`` to the last page that exists for ``total`` items."""
        limit = self.page_size.limit
        if limit is None or total == 0:
            return replace(self, page=1)
        last_page = -(-total // limit)
        return replace(self, page=min(self.page, max(last_page, 1)))


class PageMath:
    """Derived pagination values for anything with page/page_size/total/showing_all/items."""

    items: list
    page: int
    page_size: int
    total: int
    showing_all: bool

    @property
    def total_pages(self) -> int:
        if self.total == 0 or self.showing_all:
            return 1
        return -(-self.total // self.page_size)

    @property
    def has_previous(self) -> bool:
        return not self.showing_all and self.page > 1

    @property
    def has_next(self) -> bool:
        return not self.showing_all and self.page < self.total_pages

    @property
    def previous_page(self) -> int | None:
        return self.page - 1 if self.has_previous else None

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.has_next else None

    @property
    def start_index(self) -> int:
        if self.total == 0:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        if self.total == 0:
            return 0
        return self.start_index + len(self.items) - 1


@dataclass
class Page[T](PageMath):
    """Raw repository result.

    ``page_size`` stays positive even when ``showing_all`` is set, so the
    display arithmetic never divides by zero.
    """

    items: list[T] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total: int = 0
    showing_all: bool = False

    def __post_init__(self) -> None:
        self.page = max(self.page, 1)
        self.page_size = max(self.page_size, 1)


def normalize_request[K: SortKey, T](request: ListRequest[K], page: Page[T]) -> ListRequest[K]:
    """Rebuild ``request`` so it describes the page the repository actually returned.

    The repository may have clamped an out-of-range page, and an "all" listing
    reports its own size. Links are generated from this request, not from the
    inbound one.
    """
    page_size = PageSize.all() if page.showing_all else PageSize.limited(page.page_size)
    return ListRequest(page.page, page_size, request.sort_key, request.sort_direction)
