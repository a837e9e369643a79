"""ISCN record payloads built from resolved catalog items."""

from __future__ import annotations

from typing import Any, Iterable

from registrar.catalog.models import Item
from registrar.config import settings

AUTHOR_CONTRIBUTION = "http://schema.org/author"


def public_book_url(item: Item) -> str:
    """Canonical public URL of a book, built from its id and hash."""
    origin = settings.public_origin.rstrip("/")
    return f"{origin}/book/{item.detail.id}/{item.detail.hash}"


def build_record(item: Item, record_notes: str | None = None) -> dict[str, Any]:
    """Return the ISCN sign payload for *item*.

    The author field is free text and is used verbatim as a single
    stakeholder with the full reward share.

    Raises:
        ValueError: If *item* has no scraped tokens.
    """
    if item.tokens is None:
        raise ValueError(f"Item {item.id} has no content identifier")

    fingerprint = f"ipfs://{item.tokens.content_id}"
    author = item.detail.author or ""
    return {
        "type": "Book",
        "name": item.detail.title,
        "url": public_book_url(item),
        "contentFingerprints": [fingerprint],
        "stakeholders": [
            {
                "entity": {"@id": author, "name": author},
                "rewardProportion": 1,
                "contributionType": AUTHOR_CONTRIBUTION,
            }
        ],
        "description": item.detail.description,
        "author": author,
        "recordNotes": record_notes if record_notes is not None else settings.record_notes,
        "sameAs": [fingerprint],
    }


def build_records(
    items: Iterable[Item], record_notes: str | None = None
) -> list[dict[str, Any]]:
    """Build one payload per item, in order."""
    return [build_record(item, record_notes) for item in items]
