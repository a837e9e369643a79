"""Centralised settings for the Booklist Registrar.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

from registrar import __version__

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Catalog (listing API + detail pages)
    # ------------------------------------------------------------------
    catalog_origin: str = field(
        default_factory=lambda: os.environ.get("CATALOG_ORIGIN", "https://z-library.se")
    )
    public_origin: str = field(
        default_factory=lambda: os.environ.get("PUBLIC_ORIGIN", "https://z-library.se")
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "USER_AGENT",
            "Mozilla/5.0 (compatible; BooklistRegistrar/1.0; +https://github.com/booklist-registrar)",
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    @property
    def catalog_host(self) -> str:
        """Host name that listing URLs must belong to."""
        return urlparse(self.catalog_origin).hostname or ""

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------
    testnet_rpc_url: str = field(
        default_factory=lambda: os.environ.get(
            "TESTNET_RPC_URL", "https://node.testnet.like.co/rpc/"
        )
    )
    mainnet_rpc_url: str = field(
        default_factory=lambda: os.environ.get(
            "MAINNET_RPC_URL", "https://mainnet-node.like.co/rpc/"
        )
    )
    gas_price: int = field(
        default_factory=lambda: int(os.environ.get("GAS_PRICE", "10"))
    )
    min_balance: int = field(
        default_factory=lambda: int(os.environ.get("MIN_BALANCE", "1"))
    )
    dry_run_balance: int = field(
        default_factory=lambda: int(os.environ.get("DRY_RUN_BALANCE", "1000000000000"))
    )
    dry_run_fee: int = field(
        default_factory=lambda: int(os.environ.get("DRY_RUN_FEE", "2000000"))
    )

    @property
    def record_notes(self) -> str:
        """Provenance note stamped on every record and used as the tx memo."""
        return f"booklist-registrar {__version__}"

    # ------------------------------------------------------------------
    # Submission log
    # ------------------------------------------------------------------
    log_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("REGISTRAR_LOG_DIR", tempfile.gettempdir())
        )
    )

    def ensure_log_dir(self) -> None:
        """Create the log directory if it does not exist."""
        self.log_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton — import this everywhere:
#   from registrar.config import settings
settings = Settings()
