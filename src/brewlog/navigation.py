"""Outbound link generation for paginated, sortable, searchable lists.

A ``ListNavigator`` is built once per request from the *normalized* request
(see ``listing.normalize_request``) and handed to the template. Each link
method applies one change to that request and serializes the result; the
stored request is never modified.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from urllib.parse import quote

from brewlog.listing import (
    DEFAULT_PAGE_SIZE,
    ListRequest,
    Page,
    PageSize,
    SortDirection,
    SortKey,
    normalize_request,
)
from brewlog.schemas.pagination import Paginated


def page_size_from_text(value: str) -> PageSize:
    """Parse a page size sent as text (``<select>`` values, query strings).

    ``"all"`` in any case is the unbounded sentinel. Unsigned integers >= 1 are
    a limited size. ``"0"`` and anything unparsable fall back to the default
    size rather than meaning "all".
    """
    text = value.strip()
    if text.lower() == "all":
        return PageSize.all()
    if text.isascii() and text.isdigit():
        size = int(text)
        if size > 0:
            return PageSize.limited(size)
    return PageSize.limited(DEFAULT_PAGE_SIZE)


@dataclass(frozen=True)
class SortLink:
    """One sortable column header."""

    key: str
    href: str
    fragment_href: str
    active: bool
    direction: SortDirection | None
    next_direction: SortDirection


@dataclass(frozen=True)
class ListNavigator[K: SortKey]:
    base_path: str
    fragment_path: str
    request: ListRequest[K]
    search: str | None = None

    @property
    def sort_key(self) -> str:
        return self.request.sort_key.query_value()

    @property
    def sort_direction(self) -> str:
        return self.request.sort_direction.value

    @property
    def page(self) -> int:
        return self.request.page

    @property
    def page_size_value(self) -> str:
        return self.request.page_size.to_query_value()

    @property
    def is_showing_all(self) -> bool:
        return self.request.page_size.is_all

    @property
    def search_value(self) -> str:
        return self.search or ""

    @property
    def has_search(self) -> bool:
        return self.search is not None

    @property
    def path(self) -> str:
        """The list path without query or fragment, e.g. ``/roasters``."""
        return self.base_path

    def page_href(self, page: int) -> str:
        return self._href(self.base_path, self.request.with_page(page))

    def fragment_page_href(self, page: int) -> str:
        return self._href(self.fragment_path, self.request.with_page(page))

    def rows_href(self, value: str) -> str:
        return self._href(self.base_path, self._request_for_rows(value))

    def fragment_rows_href(self, value: str) -> str:
        return self._href(self.fragment_path, self._request_for_rows(value))

    def sort_href(self, key: str) -> str:
        return self._href(self.base_path, self._request_for_sort(key))

    def fragment_sort_href(self, key: str) -> str:
        return self._href(self.fragment_path, self._request_for_sort(key))

    def is_sorted_by(self, key: str) -> bool:
        candidate = type(self.request.sort_key).from_query(key)
        return candidate is not None and candidate == self.request.sort_key

    def next_sort_dir(self, key: str) -> str:
        return self._request_for_sort(key).sort_direction.value

    def sort_links(self, keys: Iterable[K] | None = None) -> list[SortLink]:
        """A header link for every variant of the sort-key enum (or ``keys``)."""
        if keys is None:
            keys = list(type(self.request.sort_key))  # type: ignore[call-overload]
        links = []
        for key in keys:
            value = key.query_value()
            active = key == self.request.sort_key
            links.append(
                SortLink(
                    key=value,
                    href=self.sort_href(value),
                    fragment_href=self.fragment_sort_href(value),
                    active=active,
                    direction=self.request.sort_direction if active else None,
                    next_direction=self.request.with_sort(key).sort_direction,
                )
            )
        return links

    def query(self) -> str:
        return self._query_string(self.request)

    def query_for_page(self, page: int) -> str:
        return self._query_string(self.request.with_page(page))

    def query_for_rows(self, value: str) -> str:
        return self._query_string(self._request_for_rows(value))

    def query_for_sort(self, key: str) -> str:
        return self._query_string(self._request_for_sort(key))

    def search_query_base(self) -> str:
        """Query for search actions: page reset to 1, no ``q`` (the client appends it)."""
        request = self.request.with_page(1)
        return (
            f"page=1&page_size={request.page_size.to_query_value()}"
            f"&sort={request.sort_key.query_value()}&dir={request.sort_direction.value}"
        )

    def _request_for_rows(self, value: str) -> ListRequest[K]:
        return self.request.with_page(1).with_page_size(page_size_from_text(value))

    def _request_for_sort(self, key: str) -> ListRequest[K]:
        key_type = type(self.request.sort_key)
        sort_key = key_type.from_query(key) or key_type.default()
        return self.request.with_page(1).with_sort(sort_key)

    def _href(self, path: str, request: ListRequest[K]) -> str:
        base, hash_sign, fragment = path.partition("#")
        return f"{base}?{self._query_string(request)}{hash_sign}{fragment}"

    def _query_string(self, request: ListRequest[K]) -> str:
        qs = (
            f"page={request.page}&page_size={request.page_size.to_query_value()}"
            f"&sort={request.sort_key.query_value()}&dir={request.sort_direction.value}"
        )
        if self.search is not None:
            qs += f"&q={quote(self.search, safe='')}"
        return qs


def build_page_view[K: SortKey, T, V](
    page: Page[T],
    request: ListRequest[K],
    view_mapper: Callable[[T], V],
    base_path: str,
    fragment_path: str,
    search: str | None = None,
) -> tuple[Paginated[V], ListNavigator[K]]:
    """Map a repository page to its view and a navigator seeded from what was returned."""
    normalized = normalize_request(request, page)
    view_page = Paginated.from_page(page, view_mapper)
    return view_page, ListNavigator(base_path, fragment_path, normalized, search)
