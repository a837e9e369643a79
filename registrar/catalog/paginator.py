"""Listing paginator: walks the booklist API page by page.

The catalog exposes a booklist as ``GET {origin}/papi/booklist/{id}/get-books/{page}``
returning ``{success, books, pagination: {next, ...}}``.  ``next`` holds the
following page number, or ``false`` on the last page.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, ConfigDict

from registrar.catalog.models import (
    HasNextPage,
    Item,
    ListingPage,
    ListingRef,
    parse_cursor,
)
from registrar.catalog.session import open_catalog_client
from registrar.config import settings
from registrar.errors import FetchError, InvalidUrlError

logger = logging.getLogger(__name__)

_BOOKLIST_PATH = re.compile(r"^/booklist/(\d+)/([^/?#]+)/?$")


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------

class _Pagination(BaseModel):
    model_config = ConfigDict(extra="ignore")

    current: int = 0
    next: Any = False


class _ListingEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: int | bool = 0
    books: List[Item]
    pagination: _Pagination


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_listing_url(url: str) -> ListingRef:
    """Validate *url* and split it into list id and token.

    Accepted form: ``http(s)://{catalog host}/booklist/{id}/{token}``, where
    the host may also be a subdomain of the configured catalog host.

    Raises:
        InvalidUrlError: If the URL does not match that form.
    """
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidUrlError(f"Not an http(s) URL: {url!r}")

    host = (parsed.hostname or "").lower()
    catalog_host = settings.catalog_host.lower()
    if host != catalog_host and not host.endswith("." + catalog_host):
        raise InvalidUrlError(f"Expected a {catalog_host} booklist URL, got host {host!r}")

    match = _BOOKLIST_PATH.match(parsed.path)
    if match is None:
        raise InvalidUrlError(
            f"Expected a path like /booklist/<id>/<token>, got {parsed.path!r}"
        )
    return ListingRef(url=url, list_id=match.group(1), token=match.group(2))


def listing_endpoint(ref: ListingRef) -> str:
    """Return the paged API endpoint for a booklist (without the page number)."""
    origin = settings.catalog_origin.rstrip("/")
    return f"{origin}/papi/booklist/{ref.list_id}/get-books"


def fetch_page(client: httpx.Client, endpoint: str, page: int) -> ListingPage:
    """Fetch and decode a single listing page.

    Raises:
        FetchError: On transport errors, 4xx/5xx responses, or a body that is
            not a valid listing envelope.
    """
    url = f"{endpoint}/{page}"
    try:
        response = client.get(url)
        response.raise_for_status()
        envelope = _ListingEnvelope.model_validate(response.json())
    except httpx.HTTPError as exc:
        raise FetchError(f"Request for listing page {page} failed: {exc}") from exc
    except ValueError as exc:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
        raise FetchError(f"Listing page {page} has an unexpected body: {exc}") from exc

    return ListingPage(
        items=list(envelope.books),
        current=envelope.pagination.current or page,
        next=parse_cursor(envelope.pagination.next),
    )


def fetch_all_items(listing_url: str) -> list[Item]:
    """Fetch every item of the booklist at *listing_url*, in listing order.

    Requests page 1, then follows the ``next`` cursor until the API reports
    no more pages.  Pages are requested one at a time and never retried.

    Raises:
        InvalidUrlError: Before any request, if *listing_url* is malformed.
        FetchError: If any page request fails; no partial result is returned.
    """
    ref = parse_listing_url(listing_url)
    endpoint = listing_endpoint(ref)

    items: list[Item] = []
    cursor = HasNextPage(1)
    with open_catalog_client(referer=ref.url) as client:
        while isinstance(cursor, HasNextPage):
            page = fetch_page(client, endpoint, cursor.page)
            logger.debug(
                "Listing %s page %d: %d item(s)", ref.list_id, cursor.page, len(page.items)
            )
            items.extend(page.items)
            cursor = page.next

    logger.info("Listing %s: %d item(s) fetched", ref.list_id, len(items))
    return items
