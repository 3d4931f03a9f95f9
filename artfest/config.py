from __future__ import annotations

import os
from dataclasses import dataclass

from .scoring import TIE_BREAKS

# Persisted file next to the package unless ARTFEST_DB_PATH says otherwise
DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "artfest.sqlite")

STORE_BACKENDS = ("sqlite", "memory")
DEFAULT_ADMIN_PASSWORD = "admin"


@dataclass(frozen=True)
class Settings:
    store: str = "sqlite"
    db_path: str = DEFAULT_DB_PATH
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    rank_tie_break: str = "stable"
    keep_orphan_scores: bool = False
    max_txn_retries: int = 25
    log_level: str = "INFO"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    val = raw.strip().lower()
    if val in ("1", "true", "yes", "on"):
        return True
    if val in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_settings() -> Settings:
    """Read ARTFEST_* environment variables into a Settings object."""
    store = os.getenv("ARTFEST_STORE", "sqlite").strip().lower()
    if store not in STORE_BACKENDS:
        raise ValueError(f"ARTFEST_STORE must be one of {STORE_BACKENDS}, got {store!r}")

    tie_break = os.getenv("ARTFEST_RANK_TIE_BREAK", "stable").strip().lower()
    if tie_break not in TIE_BREAKS:
        raise ValueError(f"ARTFEST_RANK_TIE_BREAK must be one of {TIE_BREAKS}, got {tie_break!r}")

    raw_retries = os.getenv("ARTFEST_MAX_TXN_RETRIES", "25")
    try:
        retries = int(raw_retries)
    except ValueError:
        raise ValueError(f"ARTFEST_MAX_TXN_RETRIES must be an integer, got {raw_retries!r}")
    if retries < 1:
        raise ValueError("ARTFEST_MAX_TXN_RETRIES must be at least 1")

    return Settings(
        store=store,
        db_path=os.getenv("ARTFEST_DB_PATH", DEFAULT_DB_PATH),
        admin_password=os.getenv("ARTFEST_ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
        rank_tie_break=tie_break,
        keep_orphan_scores=_env_bool("ARTFEST_KEEP_ORPHAN_SCORES", False),
        max_txn_retries=retries,
        log_level=os.getenv("ARTFEST_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
