"""Ledger client abstraction.

Key derivation, signing and broadcasting belong to a chain SDK and are not
implemented here.  A backend plugs in through the
``booklist_registrar.ledgers`` entry-point group: the registered object is
called as ``factory(rpc_url, mnemonic)`` and must return a
:class:`LedgerClient`.  :class:`DryRunLedgerClient` stands in when no chain
should be touched.
"""

from __future__ import annotations

import hashlib
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from importlib.metadata import entry_points
from typing import Any, Iterable

from registrar.config import settings
from registrar.errors import LedgerError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "booklist_registrar.ledgers"

MAINNET_DENOM = "nanolike"
TESTNET_DENOM = "nanoekil"

# 1 LIKE = 10**9 nanolike
_DISPLAY_EXPONENT = Decimal(10) ** -9


@dataclass(frozen=True)
class RecordFee:
    """Estimated cost of one record, in base units."""

    gas: int
    iscn: int

    @property
    def total(self) -> int:
        return self.gas + self.iscn


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class LedgerClient(ABC):
    """A signing connection to the ISCN ledger for one account."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Bech32 address of the signing account."""

    @abstractmethod
    def chain_id(self) -> str:
        """Chain id reported by the RPC node."""

    @abstractmethod
    def balance(self, denom: str) -> int:
        """Account balance in base units of *denom*."""

    @abstractmethod
    def estimate_record_fee(self, record: dict[str, Any], gas_price: int) -> RecordFee:
        """Estimate the gas and ISCN fee for creating *record*."""

    @abstractmethod
    def create_record(self, record: dict[str, Any], *, gas_price: int, memo: str) -> str:
        """Sign and broadcast a create-record transaction; return its hash."""


# ---------------------------------------------------------------------------
# Dry-run implementation
# ---------------------------------------------------------------------------

class DryRunLedgerClient(LedgerClient):
    """Pretends to submit records without talking to any chain.

    Transaction hashes are SHA-256 digests of the canonical record JSON so a
    dry-run log is reproducible.
    """

    def __init__(
        self,
        address: str = "like1dryrun",
        balance: int | None = None,
        fee_per_record: int | None = None,
        chain_id: str = "dry-run",
    ) -> None:
        self._address = address
        self._balance = settings.dry_run_balance if balance is None else balance
        self._fee = settings.dry_run_fee if fee_per_record is None else fee_per_record
        self._chain_id = chain_id
        self.submitted: list[dict[str, Any]] = []

    @property
    def address(self) -> str:
        return self._address

    def chain_id(self) -> str:
        return self._chain_id

    def balance(self, denom: str) -> int:
        return self._balance

    def estimate_record_fee(self, record: dict[str, Any], gas_price: int) -> RecordFee:
        return RecordFee(gas=self._fee, iscn=0)

    def create_record(self, record: dict[str, Any], *, gas_price: int, memo: str) -> str:
        canonical = json.dumps(record, sort_keys=True, ensure_ascii=False)
        tx_hash = hashlib.sha256(canonical.encode("utf-8")).hexdigest().upper()
        self.submitted.append(record)
        self._balance -= self._fee
        return tx_hash


# ---------------------------------------------------------------------------
# Factory & helpers
# ---------------------------------------------------------------------------

def connect_ledger(rpc_url: str, mnemonic: str, dry_run: bool = False) -> LedgerClient:
    """Return a ledger client for *rpc_url* signing with *mnemonic*.

    Raises:
        LedgerError: If no backend is installed, or the backend fails to
            connect.
    """
    if dry_run:
        return DryRunLedgerClient()

    backends = list(entry_points(group=ENTRY_POINT_GROUP))
    if not backends:
        raise LedgerError(
            "No ledger backend is installed; re-run with --dry-run or install "
            f"a package that registers the {ENTRY_POINT_GROUP!r} entry point."
        )

    backend = backends[0]
    logger.info("Using ledger backend %s", backend.name)
    try:
        factory = backend.load()
        return factory(rpc_url, mnemonic)
    except LedgerError:
        raise
    except Exception as exc:
        raise LedgerError(f"Ledger backend {backend.name!r} failed to connect: {exc}") from exc


def denom_for(rpc_url: str) -> str:
    """Fee denomination for the network behind *rpc_url*."""
    return TESTNET_DENOM if "testnet" in rpc_url else MAINNET_DENOM


def to_display_units(amount: int | Decimal) -> Decimal:
    """Convert base units (nanolike) into LIKE."""
    return Decimal(amount) * _DISPLAY_EXPONENT


def estimate_total_fee(
    client: LedgerClient, records: Iterable[dict[str, Any]], gas_price: int
) -> Decimal:
    """Sum gas and ISCN fees over *records*, in LIKE."""
    total = 0
    for record in records:
        total += client.estimate_record_fee(record, gas_price).total
    return to_display_units(total)


def has_sufficient_balance(balance: Decimal, fee: Decimal, minimum: Decimal | int = 1) -> bool:
    """``False`` when *balance* is under *minimum* or cannot cover *fee*."""
    return not (balance < minimum or balance < fee)
