"""``fetch`` command: export a booklist with its resolved IPFS identifiers."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer

from registrar.catalog import fetch_all_items, parse_listing_url, resolve_tokens
from registrar.catalog.models import Item, TokenPair
from registrar.errors import InvalidUrlError, RegistrarError
from cli.rendering import ProgressBarSink, export_row


def _check_listing_url(value: str) -> str:
    try:
        return parse_listing_url(value).url
    except InvalidUrlError as exc:
        raise typer.BadParameter(f"Please enter a valid booklist URL ({exc})")


def prompt_listing_url(url: Optional[str]) -> str:
    """Return a validated listing URL, prompting until one is given."""
    if url is None:
        return typer.prompt(
            "Enter the booklist URL (https://z-library.se/booklist/xxxx/xxxx)",
            value_proc=_check_listing_url,
        )
    try:
        return _check_listing_url(url)
    except typer.BadParameter as exc:
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)


def load_booklist(url: str) -> tuple[list[Item], list[Optional[TokenPair]]]:
    """Fetch every item of *url*, then scrape its tokens behind a progress bar.

    Exits with code 1 when the catalog cannot be read.
    """
    typer.echo("📚 Fetching books …", err=True)
    try:
        items = fetch_all_items(url)
        if not items:
            return items, []
        with typer.progressbar(
            length=len(items), label="🔎 Resolving IPFS hashes", file=sys.stderr
        ) as bar:
            results = resolve_tokens(items, progress=ProgressBarSink(bar), referer=url)
    except RegistrarError as exc:
        typer.echo(f"❌ Failed to fetch books: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"✅ Fetched books, total: {len(items)}", err=True)
    return items, results


def fetch(
    url: Optional[str] = typer.Argument(None, help="Booklist URL (prompted if omitted)."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write JSON lines here instead of stdout."
    ),
) -> None:
    """Export a booklist as JSON lines, one book per line."""
    url = prompt_listing_url(url)
    items, results = load_booklist(url)

    if not items:
        typer.echo("No books found, please check your URL and try again.")
        raise typer.Exit(code=1)

    lines = [
        json.dumps(export_row(item, tokens), ensure_ascii=False)
        for item, tokens in zip(items, results)
    ]
    if output is None:
        for line in lines:
            typer.echo(line)
    else:
        output.write_text("\n".join(lines) + "\n", encoding="utf-8")
        typer.echo(f"💾 Wrote {len(lines)} book(s) to {output}", err=True)

    missing = [item.detail.id for item, tokens in zip(items, results) if tokens is None]
    if missing:
        typer.echo(
            f"⚠️  No IPFS hashes for {len(missing)} book(s): "
            + ", ".join(str(i) for i in missing),
            err=True,
        )
