"""Address validation and display helpers."""

from __future__ import annotations

import re

EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
CAIP10_PREFIX = "caip10:"

# Origins that carry no trust signal (wallet-internal, local dev)
SUPPRESSED_ORIGINS = ("metamask", "localhost")


def is_evm_address(value: str | None) -> bool:
    """Return True if value is a well-formed 0x-prefixed 20-byte hex address."""
    return bool(value) and isinstance(value, str) and EVM_ADDRESS_RE.match(value) is not None


def format_address(address: str | None) -> str:
    """Truncate an address for display: first 6 + last 4 chars ("0x1234...5678")."""
    if not address or len(address) < 12:
        return address or "Unknown"
    return f"{address[:6]}...{address[-4:]}"


def display_label(label: str) -> str:
    """Truncate labels that are bare addresses (or caip10-wrapped addresses); keep names as-is."""
    if is_evm_address(label):
        return format_address(label)
    if label.startswith(CAIP10_PREFIX):
        tail = label.split(":")[-1]
        if is_evm_address(tail):
            return format_address(tail)
    return label


def address_to_caip10(address: str, chain_id: str) -> str:
    """Format an address as "caip10:<chain_id>:<address>" (chain_id like "eip155:1")."""
    return f"{CAIP10_PREFIX}{chain_id}:{address}"


def should_suppress_origin(origin_url: str | None, hostname: str | None = None) -> bool:
    """Return True when the origin provides no meaningful trust signal."""
    if not origin_url:
        return True
    if origin_url in SUPPRESSED_ORIGINS:
        return True
    if hostname and hostname in SUPPRESSED_ORIGINS:
        return True
    return False
