"""
Configuration management for the trust insight engine.

Loads settings from environment variables and an optional .env file.
"""

from trust_insight.config.env import (  # noqa: F401
    CHAIN_CONFIGS,
    INTUITION_MAINNET,
    INTUITION_TESTNET,
    ChainConfig,
    get_chain_config,
)
from trust_insight.config.settings import Settings, get_settings  # noqa: F401

__all__ = [
    "CHAIN_CONFIGS",
    "INTUITION_MAINNET",
    "INTUITION_TESTNET",
    "ChainConfig",
    "Settings",
    "get_chain_config",
    "get_settings",
]
