"""Inbound list query-string shape.

Every list endpoint accepts ``page``, ``page_size``, ``sort``, ``dir`` and
``q``. The model is consumed once, via ``into_request_and_search``, into a
normalized ``ListRequest`` plus an optional search term.
"""

from pydantic import BaseModel, Field, field_validator

from brewlog.listing import DEFAULT_PAGE_SIZE, ListRequest, PageSize, SortDirection, SortKey
from brewlog.navigation import page_size_from_text


class ListQuery(BaseModel):
    """Query parameters for list endpoints.

    ``page_size`` is a number for typed API clients and text for the UI's
    ``<select>`` (which may also send ``"all"``). Unknown ``sort``/``dir``
    values are not errors: they fall back to the sort key's defaults.
    """

    page: int | None = Field(default=None, ge=0)
    page_size: int | str | None = None
    sort: str | None = None
    dir: str | None = None
    q: str | None = None

    @field_validator("q")
    @classmethod
    def blank_search_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    def resolve_page_size(self, default_page_size: int = DEFAULT_PAGE_SIZE) -> PageSize:
        match self.page_size:
            case None:
                return PageSize.limited(max(default_page_size, 1))
            case int() as size:
                return PageSize.limited(size)
            case str() as text:
                return page_size_from_text(text)

    def into_request[K: SortKey](
        self, key_type: type[K], default_page_size: int = DEFAULT_PAGE_SIZE
    ) -> ListRequest[K]:
        sort_key = None
        if self.sort is not None:
            sort_key = key_type.from_query(self.sort)
        if sort_key is None:
            sort_key = key_type.default()

        direction = SortDirection.parse(self.dir) if self.dir is not None else None
        if direction is None:
            direction = sort_key.default_direction()

        return ListRequest(
            self.page if self.page is not None else 1,
            self.resolve_page_size(default_page_size),
            sort_key,
            direction,
        )

    def into_request_and_search[K: SortKey](
        self, key_type: type[K], default_page_size: int = DEFAULT_PAGE_SIZE
    ) -> tuple[ListRequest[K], str | None]:
        return self.into_request(key_type, default_page_size), self.q
