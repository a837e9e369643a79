"""Per-item detail scraper: pulls the IPFS CID pair out of each detail page.

The detail page renders both identifiers as copy-to-clipboard widgets::

    <span class="copy" data-copy="bafyk…" data-notification-text="IPFS CID copied">

The first widget carries the CID, the second the blake2b variant.  This is
coupled to the catalog's markup; when the layout changes, items resolve to
``None`` instead of failing the whole batch.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence
from urllib.parse import urljoin

import httpx

from registrar.catalog.models import Item, TokenPair
from registrar.catalog.session import open_catalog_client
from registrar.config import settings
from registrar.errors import FetchError
from registrar.progress import NullProgress, ProgressSink

logger = logging.getLogger(__name__)

_COPY_MARKER = re.compile(
    r"""<[^>]*?\bdata-copy=["']([^"']+)["'][^>]*?\bdata-notification-text=""",
    re.IGNORECASE,
)


def detail_url(item: Item) -> str:
    """Return the absolute URL of *item*'s detail page."""
    origin = settings.catalog_origin.rstrip("/") + "/"
    return urljoin(origin, item.detail.href)


def extract_tokens(html: str) -> Optional[TokenPair]:
    """Return the ``(content id, secondary hash)`` pair embedded in *html*.

    Exactly two markers must be present; any other count yields ``None``.
    """
    matches = _COPY_MARKER.findall(html)
    if len(matches) != 2:
        if not matches:
            logger.warning("No copy markers found; the page layout may have changed")
        else:
            logger.warning("Expected 2 copy markers, found %d", len(matches))
        return None
    content_id, secondary_hash = (m.strip() for m in matches)
    return TokenPair(content_id=content_id, secondary_hash=secondary_hash)


def resolve_tokens(
    items: Sequence[Item],
    progress: ProgressSink | None = None,
    referer: str | None = None,
) -> list[Optional[TokenPair]]:
    """Scrape the token pair for every item, one request at a time.

    The result has the same length and order as *items*; entries are
    ``None`` where extraction failed.  *progress* receives one
    ``update(processed, total)`` call per item.

    Raises:
        FetchError: If a detail page cannot be fetched at all.
    """
    sink = progress or NullProgress()
    total = len(items)
    results: list[Optional[TokenPair]] = []

    with open_catalog_client(referer=referer) as client:
        for processed, item in enumerate(items, start=1):
            url = detail_url(item)
            try:
                response = client.get(url)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise FetchError(f"Request for detail page {url} failed: {exc}") from exc

            tokens = extract_tokens(response.text)
            if tokens is None:
                logger.warning("Item %d (%s): no token pair", item.id, url)
            results.append(tokens)
            sink.update(processed, total)

    return results


def count_resolved(results: Sequence[Optional[TokenPair]]) -> int:
    """Number of entries in *results* that carry a token pair."""
    return sum(1 for r in results if r is not None)


def attach_tokens(
    items: Sequence[Item],
    results: Sequence[Optional[TokenPair]],
) -> list[Item]:
    """Merge *results* into *items* positionally.

    Items whose result is ``None`` are returned unchanged.
    """
    if len(items) != len(results):
        raise ValueError(
            f"Got {len(results)} result(s) for {len(items)} item(s)"
        )
    return [
        item if tokens is None else item.with_tokens(tokens)
        for item, tokens in zip(items, results)
    ]
