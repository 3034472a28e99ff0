"""
Application settings.

Aggregates environment configuration into one typed object for the
Data Provider client, the trusted circle cache and the insight pipeline.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from trust_insight.config.env import (
    ChainConfig,
    get_chain_config,
    get_network,
    get_request_timeout,
    get_trusted_circle_ttl_seconds,
    load_insight_env,
)


@dataclass(frozen=True)
class Settings:
    network: str
    chain: ChainConfig
    request_timeout: float
    trusted_circle_ttl_seconds: float
    state_db_path: Path | None
    log_level: str


def get_settings() -> Settings:
    """Return the current application settings (read from env on each call)."""
    load_insight_env()
    raw_db = (os.getenv("INSIGHT_STATE_DB_PATH") or "").strip()
    return Settings(
        network=get_network(),
        chain=get_chain_config(),
        request_timeout=get_request_timeout(),
        trusted_circle_ttl_seconds=get_trusted_circle_ttl_seconds(),
        state_db_path=Path(raw_db) if raw_db else None,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
