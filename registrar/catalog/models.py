"""Data models for the catalog pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class TokenPair:
    """The two identifiers scraped from a book's detail page."""

    content_id: str
    secondary_hash: str


class BookDetail(BaseModel):
    """The nested ``book`` record of a listing entry."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    title: str
    author: str | None = None
    href: str
    hash: str
    description: str | None = None


class Item(BaseModel):
    """One catalog entry, optionally enriched with its scraped tokens."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: int
    detail: BookDetail = Field(alias="book")
    tokens: TokenPair | None = None

    def with_tokens(self, tokens: TokenPair) -> Item:
        """Return a copy of this item carrying *tokens*."""
        if self.tokens is not None:
            raise ValueError(f"Item {self.id} already has tokens")
        return self.model_copy(update={"tokens": tokens})


# ---------------------------------------------------------------------------
# Pagination cursor
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HasNextPage:
    page: int


@dataclass(frozen=True)
class NoMorePages:
    pass


PageCursor = Union[HasNextPage, NoMorePages]


def parse_cursor(raw: Any) -> PageCursor:
    """Turn the API's ``pagination.next`` value into a :data:`PageCursor`.

    The API sends an integer page number while pages remain and ``false``
    afterwards.  Booleans are excluded explicitly since ``bool`` is an
    ``int`` subclass.
    """
    if isinstance(raw, bool):
        return NoMorePages()
    if isinstance(raw, int):
        return HasNextPage(raw)
    if isinstance(raw, float) and raw.is_integer():
        return HasNextPage(int(raw))
    return NoMorePages()


@dataclass
class ListingPage:
    """One decoded page of the listing API."""

    items: list[Item]
    current: int
    next: PageCursor = field(default_factory=NoMorePages)


@dataclass(frozen=True)
class ListingRef:
    """A validated booklist URL split into its parts."""

    url: str
    list_id: str
    token: str
