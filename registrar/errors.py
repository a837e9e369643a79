"""Exception hierarchy shared by the catalog and ledger layers."""

from __future__ import annotations


class RegistrarError(Exception):
    """Base class for every error raised by the registrar package."""


class InvalidUrlError(RegistrarError, ValueError):
    """The listing URL does not look like a catalog booklist URL."""


class FetchError(RegistrarError):
    """A catalog request failed or returned a body that could not be decoded."""


class LedgerError(RegistrarError):
    """The ledger client could not be built or refused an operation."""
