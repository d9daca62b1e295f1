"""Unit tests for page-size parsing, ListNavigator links and ListQuery."""

import pytest

from brewlog.listing import DEFAULT_PAGE_SIZE, ListRequest, Page, PageSize, SortDirection
from brewlog.navigation import ListNavigator, build_page_view, page_size_from_text
from brewlog.schemas.query import ListQuery
from brewlog.schemas.roaster import RoasterSortKey


def _navigator(
    page: int = 2,
    size: PageSize = PageSize.limited(10),
    key: RoasterSortKey = RoasterSortKey.NAME,
    direction: SortDirection = SortDirection.ASC,
    search: str | None = None,
) -> ListNavigator[RoasterSortKey]:
    return ListNavigator(
        "/roasters", "/roasters#roaster-list", ListRequest(page, size, key, direction), search
    )


# ---------------------------------------------------------------------------
# page_size_from_text
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("all", PageSize.all()),
        (" ALL ", PageSize.all()),
        ("25", PageSize.limited(25)),
        ("0", PageSize.limited(DEFAULT_PAGE_SIZE)),
        ("-5", PageSize.limited(DEFAULT_PAGE_SIZE)),
        ("ten", PageSize.limited(DEFAULT_PAGE_SIZE)),
        ("", PageSize.limited(DEFAULT_PAGE_SIZE)),
    ],
)
def test_page_size_from_text(text: str, expected: PageSize) -> None:
    assert page_size_from_text(text) == expected


# ---------------------------------------------------------------------------
# ListNavigator
# ---------------------------------------------------------------------------


def test_page_href_keeps_sort_and_size() -> None:
    navigator = _navigator()
    assert navigator.page_href(3) == "/roasters?page=3&page_size=10&sort=name&dir=asc"


def test_fragment_href_puts_fragment_after_query() -> None:
    navigator = _navigator()
    assert (
        navigator.fragment_page_href(1)
        == "/roasters?page=1&page_size=10&sort=name&dir=asc#roaster-list"
    )


def test_search_is_percent_encoded() -> None:
    navigator = _navigator(search="a&b c/d")
    assert navigator.page_href(1).endswith("&q=a%26b%20c%2Fd")


def test_rows_href_resets_page() -> None:
    navigator = _navigator(page=4)
    assert navigator.rows_href("all") == "/roasters?page=1&page_size=all&sort=name&dir=asc"
    assert navigator.rows_href("bogus").startswith(
        f"/roasters?page=1&page_size={DEFAULT_PAGE_SIZE}&"
    )


def test_sort_href_toggles_active_key() -> None:
    navigator = _navigator(page=3)
    assert navigator.sort_href("name") == "/roasters?page=1&page_size=10&sort=name&dir=desc"
    assert navigator.next_sort_dir("name") == "desc"
    assert navigator.next_sort_dir("created-at") == "desc"
    assert navigator.next_sort_dir("city") == "asc"


def test_sort_href_unknown_key_falls_back_to_default() -> None:
    navigator = _navigator()
    assert "sort=created-at&dir=desc" in navigator.sort_href("nonsense")


def test_is_sorted_by() -> None:
    navigator = _navigator()
    assert navigator.is_sorted_by("name")
    assert not navigator.is_sorted_by("country")
    assert not navigator.is_sorted_by("nonsense")


def test_sort_links_cover_every_key() -> None:
    links = _navigator().sort_links()
    assert [link.key for link in links] == ["created-at", "name", "country", "city"]
    active = [link for link in links if link.active]
    assert len(active) == 1
    assert active[0].key == "name"
    assert active[0].direction is SortDirection.ASC
    assert active[0].next_direction is SortDirection.DESC


def test_search_query_base_omits_search() -> None:
    navigator = _navigator(page=5, search="oslo")
    assert navigator.search_query_base() == "page=1&page_size=10&sort=name&dir=asc"


def test_navigator_exposes_current_state() -> None:
    navigator = _navigator(size=PageSize.all(), search="x")
    assert navigator.is_showing_all
    assert navigator.page_size_value == "all"
    assert navigator.sort_key == "name"
    assert navigator.sort_direction == "asc"
    assert navigator.search_value == "x"
    assert navigator.has_search
    assert navigator.path == "/roasters"


def test_build_page_view_uses_returned_page() -> None:
    request = ListRequest(9, PageSize.limited(10), RoasterSortKey.NAME, SortDirection.ASC)
    page = Page(items=["a", "b"], page=2, page_size=10, total=12)
    view, navigator = build_page_view(
        page, request, str.upper, "/roasters", "/roasters#roaster-list"
    )
    assert view.items == ["A", "B"]
    assert view.page == 2
    assert navigator.page == 2
    assert view.page_size_query_value == "10"
    assert view.is_page_size(10)


# ---------------------------------------------------------------------------
# ListQuery
# ---------------------------------------------------------------------------


def test_list_query_defaults() -> None:
    request, search = ListQuery().into_request_and_search(RoasterSortKey)
    assert request == ListRequest.default_query(RoasterSortKey)
    assert search is None


def test_list_query_unknown_sort_and_dir_fall_back() -> None:
    request = ListQuery(sort="weight", dir="up").into_request(RoasterSortKey)
    assert request.sort_key is RoasterSortKey.CREATED_AT
    assert request.sort_direction is SortDirection.DESC


def test_list_query_known_sort_uses_its_direction() -> None:
    request = ListQuery(sort="country").into_request(RoasterSortKey)
    assert request.sort_direction is SortDirection.ASC
    assert ListQuery(sort="country", dir="DESC").into_request(RoasterSortKey).sort_direction is (
        SortDirection.DESC
    )


def test_list_query_page_zero_and_sizes() -> None:
    request = ListQuery(page=0, page_size="all").into_request(RoasterSortKey)
    assert request.page == 1
    assert request.page_size.is_all

    assert ListQuery(page_size=0).into_request(RoasterSortKey).page_size.is_all
    assert ListQuery(page_size="0").into_request(RoasterSortKey).page_size == PageSize.limited(
        DEFAULT_PAGE_SIZE
    )
    assert ListQuery(page_size=80).into_request(RoasterSortKey).page_size == PageSize.limited(50)


def test_list_query_blank_search_is_none() -> None:
    assert ListQuery(q="   ").q is None
    assert ListQuery(q="  oslo ").q == "oslo"


def test_list_query_page_sort_direction_and_search_together() -> None:
    query = ListQuery(page=3, sort="name", dir="desc", q="  latte  ")
    request, search = query.into_request_and_search(RoasterSortKey)
    assert request.page == 3
    assert request.sort_key is RoasterSortKey.NAME
    assert request.sort_direction is SortDirection.DESC
    assert search == "latte"
