"""Terminal rendering helpers shared by the CLI commands."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from registrar.catalog.models import Item, TokenPair
from registrar.ledger.records import public_book_url
from registrar.progress import ProgressSink


class ProgressBarSink(ProgressSink):
    """Feeds running counts into a ``typer.progressbar``."""

    def __init__(self, bar: Any) -> None:
        self._bar = bar
        self._seen = 0

    def update(self, processed: int, total: int) -> None:
        self._bar.update(processed - self._seen)
        self._seen = processed


def format_like(amount: Decimal) -> str:
    """Render a LIKE amount without exponent or trailing zeros."""
    return f"{amount.normalize():f}"


def export_row(item: Item, tokens: Optional[TokenPair]) -> dict[str, Any]:
    """One line of ``fetch`` output."""
    return {
        "id": item.detail.id,
        "title": item.detail.title,
        "author": item.detail.author,
        "url": public_book_url(item),
        "contentId": tokens.content_id if tokens else None,
        "secondaryHash": tokens.secondary_hash if tokens else None,
    }
