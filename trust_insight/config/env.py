"""
Environment variable loading and validation for the trust insight engine.

- INSIGHT_NETWORK: testnet | mainnet (default: testnet)
- INSIGHT_GRAPHQL_URL: Data Provider GraphQL endpoint (overrides the chain default)
- INSIGHT_REQUEST_TIMEOUT: Data Provider request timeout in seconds (default: 10)
- TRUSTED_CIRCLE_TTL_SECONDS: trusted circle cache lifetime (default: 3600)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

from trust_insight.core.exceptions import ConfigError

# Project root: config is trust_insight/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_TRUSTED_CIRCLE_TTL_SECONDS = 3600
DEFAULT_REQUEST_TIMEOUT = 10.0


@dataclass(frozen=True)
class ChainConfig:
    """Reputation protocol deployment: endpoints and canonical atom ids."""

    chain_id: int
    chain_id_hex: str
    chain_name: str
    chain_key: str
    currency_symbol: str
    decimal_precision: int
    has_tag_atom_id: str
    trustworthy_atom_id: str
    rpc_url: str
    backend_url: str


INTUITION_TESTNET = ChainConfig(
    chain_id=13579,
    chain_id_hex="0x350B",
    chain_name="Intuition Testnet",
    chain_key="intuition-testnet",
    currency_symbol="TTRUST",
    decimal_precision=18,
    has_tag_atom_id="0x6de69cc0ae3efe4000279b1bf365065096c8715d8180bc2a98046ee07d3356fd",
    trustworthy_atom_id="0xe9c0e287737685382bd34d51090148935bdb671c98d20180b2fec15bd263f73a",
    rpc_url="https://testnet.rpc.intuition.systems",
    backend_url="https://testnet.intuition.sh/v1/graphql",
)

INTUITION_MAINNET = ChainConfig(
    chain_id=1155,
    chain_id_hex="0x483",
    chain_name="Intuition Mainnet",
    chain_key="intuition-mainnet",
    currency_symbol="TRUST",
    decimal_precision=18,
    has_tag_atom_id="0x6de69cc0ae3efe4000279b1bf365065096c8715d8180bc2a98046ee07d3356fd",
    trustworthy_atom_id="0xe9c0e287737685382bd34d51090148935bdb671c98d20180b2fec15bd263f73a",
    rpc_url="https://rpc.intuition.systems",
    backend_url="https://mainnet.intuition.sh/v1/graphql",
)

CHAIN_CONFIGS = {
    "testnet": INTUITION_TESTNET,
    "mainnet": INTUITION_MAINNET,
}


def load_insight_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def get_network() -> str:
    """
    Return INSIGHT_NETWORK from env: testnet | mainnet.
    Default: testnet. Unknown values raise ConfigError.
    """
    load_insight_env()
    raw = (os.getenv("INSIGHT_NETWORK") or "testnet").strip().lower()
    if raw not in CHAIN_CONFIGS:
        raise ConfigError(f"Unknown INSIGHT_NETWORK: {raw!r}")
    return raw


def get_chain_config() -> ChainConfig:
    """Return the chain config for the current network; INSIGHT_GRAPHQL_URL overrides backend_url."""
    chain = CHAIN_CONFIGS[get_network()]
    url = (os.getenv("INSIGHT_GRAPHQL_URL") or "").strip()
    if url:
        chain = replace(chain, backend_url=url)
    return chain


def _positive_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def get_trusted_circle_ttl_seconds() -> float:
    """Return TRUSTED_CIRCLE_TTL_SECONDS (default 3600). Must be positive."""
    load_insight_env()
    return _positive_float("TRUSTED_CIRCLE_TTL_SECONDS", DEFAULT_TRUSTED_CIRCLE_TTL_SECONDS)


def get_request_timeout() -> float:
    """Return INSIGHT_REQUEST_TIMEOUT in seconds (default 10)."""
    load_insight_env()
    return _positive_float("INSIGHT_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)
