import pytest

from conftest import make_response, next_link
from merakidash.domain.exceptions import DecodeError, PaginationError
from merakidash.infrastructure.http.pagination import FetchedPage, PaginationWalker, next_cursor

PAGE_2 = "https://api.meraki.com/api/v1/organizations/1/networks?startingAfter=N_2"
PAGE_3 = "https://api.meraki.com/api/v1/organizations/1/networks?startingAfter=N_3"


def test_next_cursor_reads_link_header():
    response = make_response(200, [], {"Link": f'<https://x/first>; rel=first, <{PAGE_2}>; rel=next'})
    assert next_cursor(response) == PAGE_2


def test_next_cursor_none_without_next():
    assert next_cursor(make_response(200, [], {"Link": "<https://x/first>; rel=first"})) is None
    assert next_cursor(make_response(200, [])) is None


def test_walk_concatenates_pages_in_order():
    pages = {
        PAGE_2: FetchedPage(["B"], make_response(200, ["B"], next_link(PAGE_3)), attempts=2),
        PAGE_3: FetchedPage(["C"], make_response(200, ["C"])),
    }
    fetched = []

    def fetch(path, cursor):
        fetched.append((path, cursor))
        return pages[cursor]

    first = make_response(200, ["A"], next_link(PAGE_2))
    collection = PaginationWalker().walk("/organizations/1/networks", ["A"], first, fetch)

    assert collection.items == ["A", "B", "C"]
    assert collection.pages == 3
    assert collection.attempts == 4
    assert fetched == [("/organizations/1/networks", PAGE_2), ("/organizations/1/networks", PAGE_3)]
    assert collection.last_response is pages[PAGE_3].response


def test_walk_stops_at_page_cap():
    def fetch(path, cursor):
        return FetchedPage(["x"], make_response(200, ["x"], next_link(cursor + "x")))

    walker = PaginationWalker(max_pages=3)
    with pytest.raises(PaginationError) as exc_info:
        walker.walk("/p", ["x"], make_response(200, ["x"], next_link(PAGE_2)), fetch)
    assert exc_info.value.pages == 3


def test_walk_detects_repeated_cursor():
    def fetch(path, cursor):
        return FetchedPage(["x"], make_response(200, ["x"], next_link(PAGE_2)))

    with pytest.raises(PaginationError, match="repeated"):
        PaginationWalker().walk("/p", ["x"], make_response(200, ["x"], next_link(PAGE_2)), fetch)


def test_walk_rejects_non_list_continuation():
    def fetch(path, cursor):
        return FetchedPage({"oops": True}, make_response(200, {"oops": True}))

    with pytest.raises(DecodeError) as exc_info:
        PaginationWalker().walk("/p", ["x"], make_response(200, ["x"], next_link(PAGE_2)), fetch)
    assert exc_info.value.path == "/p"
    assert exc_info.value.url == PAGE_2
    assert PAGE_2 in str(exc_info.value)
