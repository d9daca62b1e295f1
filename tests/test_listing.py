"""Unit tests for the listing primitives: PageSize, ListRequest and Page."""

from brewlog.listing import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    ListRequest,
    Page,
    PageSize,
    SortDirection,
    normalize_request,
)
from brewlog.schemas.roaster import RoasterSortKey


def _request(page: int = 1, size: PageSize | None = None) -> ListRequest[RoasterSortKey]:
    return ListRequest(
        page, size or PageSize.limited(10), RoasterSortKey.NAME, SortDirection.ASC
    )


# ---------------------------------------------------------------------------
# SortDirection
# ---------------------------------------------------------------------------


def test_sort_direction_parse_is_case_insensitive() -> None:
    assert SortDirection.parse("ASC") is SortDirection.ASC
    assert SortDirection.parse("Desc") is SortDirection.DESC
    assert SortDirection.parse("sideways") is None


def test_sort_direction_opposite() -> None:
    assert SortDirection.ASC.opposite() is SortDirection.DESC
    assert SortDirection.DESC.opposite() is SortDirection.ASC


# ---------------------------------------------------------------------------
# PageSize / ListRequest normalization
# ---------------------------------------------------------------------------


def test_limited_zero_is_all() -> None:
    assert PageSize.limited(0).is_all
    assert PageSize.limited(0).to_query_value() == "all"


def test_request_clamps_page_and_size() -> None:
    request = _request(page=0, size=PageSize.limited(500))
    assert request.page == 1
    assert request.page_size == PageSize.limited(MAX_PAGE_SIZE)

    negative = _request(page=-4, size=PageSize(-3))
    assert negative.page == 1
    assert negative.page_size == PageSize.limited(1)


def test_request_offset_and_limit() -> None:
    request = _request(page=3, size=PageSize.limited(25))
    assert request.offset == 50
    assert request.limit == 25

    show_all = ListRequest.show_all(RoasterSortKey.NAME, SortDirection.ASC)
    assert show_all.offset == 0
    assert show_all.limit is None


def test_default_query_uses_key_defaults() -> None:
    request = ListRequest.default_query(RoasterSortKey)
    assert request.page == 1
    assert request.page_size == PageSize.limited(DEFAULT_PAGE_SIZE)
    assert request.sort_key is RoasterSortKey.CREATED_AT
    assert request.sort_direction is SortDirection.DESC


def test_with_methods_renormalize_and_do_not_mutate() -> None:
    request = _request(page=2)
    assert request.with_page(-1).page == 1
    assert request.with_page_size(PageSize.limited(999)).page_size == PageSize.limited(50)
    assert request.page == 2


def test_with_sort_toggles_current_key() -> None:
    request = _request()
    toggled = request.with_sort(RoasterSortKey.NAME)
    assert toggled.sort_direction is SortDirection.DESC
    assert toggled.with_sort(RoasterSortKey.NAME).sort_direction is SortDirection.ASC


def test_with_sort_new_key_uses_its_default_direction() -> None:
    request = _request()
    assert request.with_sort(RoasterSortKey.CREATED_AT).sort_direction is SortDirection.DESC
    assert request.with_sort(RoasterSortKey.COUNTRY).sort_direction is SortDirection.ASC


def test_with_sort_and_direction_is_explicit() -> None:
    request = _request().with_sort_and_direction(RoasterSortKey.CITY, SortDirection.DESC)
    assert request.sort_key is RoasterSortKey.CITY
    assert request.sort_direction is SortDirection.DESC


def test_ensure_page_within() -> None:
    request = _request(page=9, size=PageSize.limited(10))
    assert request.ensure_page_within(25).page == 3
    assert request.ensure_page_within(0).page == 1
    assert _request(page=2).ensure_page_within(100).page == 2


def test_ninety_five_rows_in_pages_of_ten() -> None:
    assert Page(items=[], page=1, page_size=10, total=95).total_pages == 10
    assert _request(page=99).ensure_page_within(95).page == 10
    assert _request(page=0).ensure_page_within(95).page == 1


# ---------------------------------------------------------------------------
# Page arithmetic
# ---------------------------------------------------------------------------


def test_page_math_middle_page() -> None:
    page = Page(items=list(range(10)), page=2, page_size=10, total=25)
    assert page.total_pages == 3
    assert page.has_previous and page.has_next
    assert page.previous_page == 1
    assert page.next_page == 3
    assert page.start_index == 11
    assert page.end_index == 20


def test_page_math_last_partial_page() -> None:
    page = Page(items=list(range(5)), page=3, page_size=10, total=25)
    assert not page.has_next
    assert page.next_page is None
    assert page.start_index == 21
    assert page.end_index == 25


def test_page_math_empty() -> None:
    page = Page(items=[], page=1, page_size=10, total=0)
    assert page.total_pages == 1
    assert page.start_index == 0
    assert page.end_index == 0
    assert not page.has_previous
    assert not page.has_next


def test_page_math_showing_all() -> None:
    page = Page(items=list(range(7)), page=1, page_size=7, total=7, showing_all=True)
    assert page.total_pages == 1
    assert not page.has_previous
    assert not page.has_next
    assert page.end_index == 7


def test_page_clamps_non_positive_values() -> None:
    page = Page(items=[], page=0, page_size=0, total=0)
    assert page.page == 1
    assert page.page_size == 1


def test_normalize_request_reflects_returned_page() -> None:
    request = _request(page=9)
    clamped = normalize_request(request, Page(items=[1], page=3, page_size=10, total=21))
    assert clamped.page == 3
    assert clamped.sort_key is RoasterSortKey.NAME

    showing_all = normalize_request(
        request, Page(items=[1, 2], page=1, page_size=2, total=2, showing_all=True)
    )
    assert showing_all.page_size.is_all
