"""Sequential record submission with an append-only JSON-lines log."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from registrar.ledger.client import LedgerClient

logger = logging.getLogger(__name__)


def default_log_path(log_dir: Path, today: date | None = None) -> Path:
    """Path of the day's log file inside *log_dir*."""
    today = today or date.today()
    return Path(log_dir) / f"booklist-registrar-{today.isoformat()}.log"


class SubmissionLog:
    """Append-only log: one JSON object per submitted record.

    Lines are meant for people reading them after a run, not for replay.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._fh = None

    def open(self) -> SubmissionLog:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("a", encoding="utf-8")
        return self

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> SubmissionLog:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def append(self, record: dict[str, Any], tx_hash: str) -> dict[str, Any]:
        """Write *record* plus its transaction hash and a UTC timestamp."""
        if self._fh is None:
            raise RuntimeError("SubmissionLog is not open")
        entry = {
            **record,
            "txHash": tx_hash,
            "date": datetime.now(timezone.utc).isoformat(),
        }
        self._fh.write(json.dumps(entry, ensure_ascii=False) + "\n")
        self._fh.flush()
        return entry


def submit_records(
    client: LedgerClient,
    records: Sequence[dict[str, Any]],
    log: SubmissionLog,
    *,
    gas_price: int,
    memo: str,
    on_submitted: Optional[Callable[[int, int, str], None]] = None,
) -> list[str]:
    """Create one ledger record per payload, strictly in order.

    Each successful submission is logged before the next one starts, so a
    failure part-way through leaves the log describing what did go through.
    *on_submitted* is called with ``(index, total, tx_hash)``, 1-based.

    Returns:
        The transaction hashes, in submission order.
    """
    total = len(records)
    tx_hashes: list[str] = []
    for index, record in enumerate(records, start=1):
        tx_hash = client.create_record(record, gas_price=gas_price, memo=memo)
        log.append(record, tx_hash)
        tx_hashes.append(tx_hash)
        logger.info("Record %d/%d created: %s", index, total, tx_hash)
        if on_submitted is not None:
            on_submitted(index, total, tx_hash)
    return tx_hashes
