"""Ledger package — ISCN payloads, client interface & submission log."""

from registrar.ledger.client import (
    DryRunLedgerClient,
    LedgerClient,
    connect_ledger,
    denom_for,
    estimate_total_fee,
)
from registrar.ledger.records import build_record, build_records
from registrar.ledger.submission import SubmissionLog, default_log_path, submit_records

__all__ = [
    "LedgerClient",
    "DryRunLedgerClient",
    "connect_ledger",
    "denom_for",
    "estimate_total_fee",
    "build_record",
    "build_records",
    "SubmissionLog",
    "default_log_path",
    "submit_records",
]
