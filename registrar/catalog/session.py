"""Shared ``httpx`` client construction for catalog requests."""

from __future__ import annotations

import httpx

from registrar.config import settings


def open_catalog_client(referer: str | None = None) -> httpx.Client:
    """Return a client that identifies itself the way the catalog expects.

    Every request carries the configured ``User-Agent``; when *referer* is
    given (the booklist URL the user pasted) it is sent as ``Referer`` too.
    Use it as a context manager so the connection pool is closed.
    """
    headers = {"User-Agent": settings.user_agent}
    if referer:
        headers["Referer"] = referer
    return httpx.Client(
        headers=headers,
        timeout=settings.request_timeout,
        follow_redirects=True,
    )
