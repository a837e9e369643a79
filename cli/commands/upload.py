"""``upload`` command: the interactive booklist → ISCN walk-through."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from registrar.catalog import attach_tokens, count_resolved
from registrar.config import settings
from registrar.ledger.client import (
    connect_ledger,
    denom_for,
    estimate_total_fee,
    has_sufficient_balance,
    to_display_units,
)
from registrar.ledger.records import build_records
from registrar.ledger.submission import SubmissionLog, default_log_path, submit_records
from cli.commands.fetch import load_booklist, prompt_listing_url
from cli.rendering import format_like


class Network(str, Enum):
    testnet = "testnet"
    mainnet = "mainnet"


def _rpc_url_for(network: Network) -> str:
    if network is Network.mainnet:
        return settings.mainnet_rpc_url
    return settings.testnet_rpc_url


def _check_network(value: str) -> Network:
    try:
        return Network(value.strip().lower())
    except ValueError:
        raise typer.BadParameter("Choose 'testnet' or 'mainnet'")


def _bye(code: int = 0) -> typer.Exit:
    typer.echo("Bye!")
    return typer.Exit(code=code)


def upload(
    url: Optional[str] = typer.Argument(None, help="Booklist URL (prompted if omitted)."),
    rpc_url: Optional[str] = typer.Option(
        None, "--rpc-url", help="Ledger RPC endpoint (prompted as testnet/mainnet if omitted)."
    ),
    mnemonic: Optional[str] = typer.Option(
        None, "--mnemonic", envvar="REGISTRAR_MNEMONIC", help="Signing mnemonic."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Build and log records without touching the ledger."
    ),
    log_dir: Optional[Path] = typer.Option(
        None, "--log-dir", help="Directory for the submission log (default: temp dir)."
    ),
) -> None:
    """Fetch a booklist, resolve IPFS hashes and register every book as an ISCN record."""
    url = prompt_listing_url(url)

    # ------------------------------------------------------------------
    # 1 — Catalog
    # ------------------------------------------------------------------
    items, results = load_booklist(url)

    if not items:
        typer.echo("❌ No books found, please check your URL and try again.")
        raise _bye(1)

    if count_resolved(results) != len(items):
        typer.echo(
            "❌ Failed to get IPFS hashes for all books, please check your URL and try again."
        )
        raise _bye(1)

    records = build_records(attach_tokens(items, results), settings.record_notes)

    # ------------------------------------------------------------------
    # 2 — Ledger settings
    # ------------------------------------------------------------------
    if rpc_url is None:
        network = typer.prompt(
            "Select a network (testnet, mainnet)",
            default=Network.testnet.value,
            value_proc=_check_network,
        )
        rpc_url = _rpc_url_for(Network(network))

    if mnemonic is None and not dry_run:
        mnemonic = typer.prompt("Enter your mnemonic", hide_input=True)

    if not yes and not typer.confirm(f"Confirm to upload {len(records)} record(s)?"):
        raise _bye(0)

    # ------------------------------------------------------------------
    # 3 — Balance & fee
    # ------------------------------------------------------------------
    try:
        client = connect_ledger(rpc_url, mnemonic or "", dry_run=dry_run)
        fee = estimate_total_fee(client, records, settings.gas_price)
        balance = to_display_units(client.balance(denom_for(rpc_url)))
        chain_id = client.chain_id()
    except Exception as exc:
        typer.echo(f"❌ Failed to connect to the ledger: {exc}")
        raise typer.Exit(code=1)

    typer.echo(f"💰 Account balance : {format_like(balance)} LIKE")
    typer.echo(f"⛽ Estimated fee   : {format_like(fee)} LIKE")

    if not has_sufficient_balance(balance, fee, settings.min_balance):
        typer.echo(
            "❌ Insufficient account balance, please make sure you have enough "
            "LIKE tokens in your account."
        )
        raise _bye(1)

    # ------------------------------------------------------------------
    # 4 — Submit
    # ------------------------------------------------------------------
    log_path = default_log_path(log_dir or settings.log_dir)

    def _on_submitted(index: int, total: int, tx_hash: str) -> None:
        typer.echo(f"✅ ISCN {index}/{total} created, tx hash: {tx_hash}")

    typer.echo(f"🚀 Creating ISCN records on {chain_id} …")
    try:
        with SubmissionLog(log_path) as log:
            submit_records(
                client,
                records,
                log,
                gas_price=settings.gas_price,
                memo=settings.record_notes,
                on_submitted=_on_submitted,
            )
    except Exception as exc:
        typer.echo(f"❌ Failed to upload books to ISCN: {exc}")
        typer.echo(f"   Records created so far are listed in {log_path}")
        raise typer.Exit(code=1)

    typer.echo(
        "\n--- Upload complete ---\n"
        f"  Records : {len(records)}\n"
        f"  Log     : {log_path}"
    )
