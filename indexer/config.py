"""Centralised settings for the indexing auditor.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Status cache
    # ------------------------------------------------------------------
    cache_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("INDEXER_CACHE_DIR", ".cache"))
    )
    cache_timeout_days: int = field(
        default_factory=lambda: int(os.environ.get("INDEXER_CACHE_TIMEOUT_DAYS", "14"))
    )

    # ------------------------------------------------------------------
    # Status fetch
    # ------------------------------------------------------------------
    batch_size: int = field(
        default_factory=lambda: int(os.environ.get("INDEXER_BATCH_SIZE", "50"))
    )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    retry_max: int = field(
        default_factory=lambda: int(os.environ.get("INDEXER_RETRY_MAX", "5"))
    )
    retry_base_delay: float = field(
        default_factory=lambda: float(os.environ.get("INDEXER_RETRY_BASE_DELAY", "1.0"))
    )

    # ------------------------------------------------------------------
    # Service account credentials
    # ------------------------------------------------------------------
    service_account_path: Path = field(
        default_factory=lambda: Path(
            os.environ.get("GIS_SERVICE_ACCOUNT_PATH", "service_account.json")
        )
    )
    client_email: str = field(
        default_factory=lambda: os.environ.get("GIS_CLIENT_EMAIL", "")
    )
    private_key: str = field(
        default_factory=lambda: os.environ.get("GIS_PRIVATE_KEY", "")
    )

    def ensure_cache_dir(self) -> None:
        """Create the cache directory if it does not exist."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from indexer.config import settings
settings = Settings()
