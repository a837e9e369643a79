"""Catalog package — booklist pagination & detail-page token scraping."""

from registrar.catalog.models import Item, TokenPair
from registrar.catalog.paginator import fetch_all_items, parse_listing_url
from registrar.catalog.scraper import attach_tokens, count_resolved, resolve_tokens

__all__ = [
    "fetch_all_items",
    "parse_listing_url",
    "resolve_tokens",
    "attach_tokens",
    "count_resolved",
    "Item",
    "TokenPair",
]
