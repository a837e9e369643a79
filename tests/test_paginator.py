"""Tests for the listing paginator.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer; each listing page is a
  separate route so request counts and order can be asserted per page.
- Pages are synthetic but shaped like the real ``get-books`` payload,
  including the fields the parser is expected to ignore.
"""

from __future__ import annotations

import httpx
import pytest
import respx
from pydantic import ValidationError

from registrar.catalog.models import (
    BookDetail,
    HasNextPage,
    Item,
    NoMorePages,
    parse_cursor,
)
from registrar.catalog.paginator import (
    fetch_all_items,
    listing_endpoint,
    parse_listing_url,
)
from registrar.config import settings
from registrar.errors import FetchError, InvalidUrlError


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

LISTING_URL = "https://z-library.se/booklist/1295974/387287"
ENDPOINT = "https://z-library.se/papi/booklist/1295974/get-books"


def _book(n: int) -> dict:
    return {
        "id": 90000 + n,
        "readlist_id": 1295974,
        "book_id": n,
        "description": None,
        "deleted": 0,
        "date": {"date": "2023-05-01 10:00:00.000000", "timezone_type": 3, "timezone": "UTC"},
        "book": {
            "id": n,
            "title": f"Book {n}",
            "author": f"Author {n}",
            "year": 2001,
            "extension": "pdf",
            "href": f"/book/{n}/h{n}/book-{n}.html",
            "hash": f"h{n}",
            "kindleAvailable": False,
        },
    }


def _page(start: int, count: int, current: int, next_page) -> dict:
    return {
        "success": 1,
        "books": [_book(n) for n in range(start, start + count)],
        "pagination": {
            "limit": 20,
            "current": current,
            "before": current - 1,
            "next": next_page,
            "total_items": 75,
            "total_pages": 4,
        },
    }


# Four pages, 75 books, the last page reports next = false.
_PAGES = {
    1: _page(1, 20, 1, 2),
    2: _page(21, 20, 2, 3),
    3: _page(41, 20, 3, 4),
    4: _page(61, 15, 4, False),
}


def _mock_pages(router: respx.MockRouter, pages: dict[int, dict]) -> dict[int, respx.Route]:
    return {
        number: router.get(f"{ENDPOINT}/{number}").mock(
            return_value=httpx.Response(200, json=body)
        )
        for number, body in pages.items()
    }


# ---------------------------------------------------------------------------
# parse_cursor
# ---------------------------------------------------------------------------

class TestParseCursor:
    def test_integer_is_next_page(self) -> None:
        assert parse_cursor(2) == HasNextPage(2)

    def test_false_is_no_more_pages(self) -> None:
        assert parse_cursor(False) == NoMorePages()

    def test_true_is_not_a_page_number(self) -> None:
        assert parse_cursor(True) == NoMorePages()

    def test_missing_or_null(self) -> None:
        assert parse_cursor(None) == NoMorePages()

    def test_numeric_string_is_not_a_page_number(self) -> None:
        assert parse_cursor("3") == NoMorePages()

    def test_integral_float(self) -> None:
        assert parse_cursor(3.0) == HasNextPage(3)

    def test_fractional_float(self) -> None:
        assert parse_cursor(2.5) == NoMorePages()


# ---------------------------------------------------------------------------
# parse_listing_url
# ---------------------------------------------------------------------------

class TestParseListingUrl:
    def test_valid_url(self) -> None:
        ref = parse_listing_url(LISTING_URL)
        assert ref.list_id == "1295974"
        assert ref.token == "387287"
        assert ref.url == LISTING_URL

    def test_trailing_slash_and_whitespace(self) -> None:
        ref = parse_listing_url(f"  {LISTING_URL}/ ")
        assert ref.list_id == "1295974"

    def test_subdomain_accepted(self) -> None:
        ref = parse_listing_url("https://eu.z-library.se/booklist/42/reading-list")
        assert ref.list_id == "42"
        assert ref.token == "reading-list"

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/booklist/1295974/387287",
            "https://z-library.se.evil.com/booklist/1295974/387287",
            "https://z-library.se/book/1295974/387287",
            "https://z-library.se/booklist/abc/387287",
            "https://z-library.se/booklist/1295974",
            "ftp://z-library.se/booklist/1295974/387287",
            "not a url",
            "",
        ],
    )
    def test_invalid_urls_raise(self, url: str) -> None:
        with pytest.raises(InvalidUrlError):
            parse_listing_url(url)

    def test_invalid_url_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_listing_url("https://example.com/")

    def test_endpoint_uses_configured_origin(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "catalog_origin", "https://mirror.z-library.se/")
        ref = parse_listing_url("https://mirror.z-library.se/booklist/7/x")
        assert listing_endpoint(ref) == "https://mirror.z-library.se/papi/booklist/7/get-books"


# ---------------------------------------------------------------------------
# Item model
# ---------------------------------------------------------------------------

class TestItemModel:
    def test_parses_listing_entry(self) -> None:
        item = Item.model_validate(_book(5))
        assert item.id == 90005
        assert item.detail.id == 5
        assert item.detail.href == "/book/5/h5/book-5.html"
        assert item.tokens is None

    def test_is_immutable(self) -> None:
        item = Item(id=1, detail=BookDetail(id=1, title="T", href="/b", hash="h"))
        with pytest.raises(ValidationError):
            item.id = 2  # type: ignore[misc]


# ---------------------------------------------------------------------------
# fetch_all_items
# ---------------------------------------------------------------------------

class TestFetchAllItems:
    def test_collects_all_pages_in_order(self) -> None:
        with respx.mock() as router:
            routes = _mock_pages(router, _PAGES)
            items = fetch_all_items(LISTING_URL)

        assert len(items) == 75
        assert [i.detail.id for i in items] == list(range(1, 76))
        assert all(route.call_count == 1 for route in routes.values())
        requested = [str(call.request.url) for call in router.calls]
        assert requested == [f"{ENDPOINT}/{n}" for n in (1, 2, 3, 4)]

    def test_single_page(self) -> None:
        with respx.mock() as router:
            _mock_pages(router, {1: _page(1, 3, 1, False)})
            items = fetch_all_items(LISTING_URL)

        assert [i.detail.title for i in items] == ["Book 1", "Book 2", "Book 3"]
        assert router.calls.call_count == 1

    def test_follows_next_value_not_sequence(self) -> None:
        """The ``next`` field decides the page requested, even if it skips."""
        with respx.mock() as router:
            _mock_pages(router, {1: _page(1, 2, 1, 5), 5: _page(3, 2, 5, False)})
            items = fetch_all_items(LISTING_URL)

        assert len(items) == 4
        assert str(router.calls[-1].request.url) == f"{ENDPOINT}/5"

    def test_missing_next_stops(self) -> None:
        body = _page(1, 2, 1, False)
        del body["pagination"]["next"]
        with respx.mock() as router:
            _mock_pages(router, {1: body})
            items = fetch_all_items(LISTING_URL)

        assert len(items) == 2

    def test_empty_listing(self) -> None:
        with respx.mock() as router:
            _mock_pages(router, {1: _page(1, 0, 1, False)})
            assert fetch_all_items(LISTING_URL) == []

    def test_sends_user_agent_and_referer(self) -> None:
        with respx.mock() as router:
            _mock_pages(router, {1: _page(1, 1, 1, 2), 2: _page(2, 1, 2, False)})
            fetch_all_items(LISTING_URL)

        for call in router.calls:
            assert call.request.headers["Referer"] == LISTING_URL
            assert call.request.headers["User-Agent"] == settings.user_agent

    def test_invalid_url_makes_no_requests(self) -> None:
        with respx.mock(assert_all_called=False) as router:
            route = router.get(url__startswith="https://").mock(
                return_value=httpx.Response(200, json=_page(1, 1, 1, False))
            )
            with pytest.raises(InvalidUrlError):
                fetch_all_items("https://example.com/booklist/1/2")

        assert route.call_count == 0
        assert router.calls.call_count == 0

    def test_http_error_aborts(self) -> None:
        with respx.mock() as router:
            _mock_pages(router, {1: _page(1, 20, 1, 2)})
            router.get(f"{ENDPOINT}/2").mock(return_value=httpx.Response(500))
            with pytest.raises(FetchError):
                fetch_all_items(LISTING_URL)

    def test_transport_error_aborts(self) -> None:
        with respx.mock() as router:
            router.get(f"{ENDPOINT}/1").mock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(FetchError):
                fetch_all_items(LISTING_URL)

    def test_non_json_body_aborts(self) -> None:
        with respx.mock() as router:
            router.get(f"{ENDPOINT}/1").mock(
                return_value=httpx.Response(200, text="<html>blocked</html>")
            )
            with pytest.raises(FetchError):
                fetch_all_items(LISTING_URL)

    def test_malformed_body_aborts(self) -> None:
        with respx.mock() as router:
            router.get(f"{ENDPOINT}/1").mock(
                return_value=httpx.Response(200, json={"success": 0, "error": "nope"})
            )
            with pytest.raises(FetchError):
                fetch_all_items(LISTING_URL)
