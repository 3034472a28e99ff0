"""
Per-transaction insight results, tagged by what the Data Provider knows.

AccountInsight / OriginInsight are tagged variants: the tag decides which
fields are populated, and __post_init__ rejects inconsistent combinations so
the rendering layer can branch on the tag alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from trust_insight.analysis_engine.trust import TrustDistributionAnalysis
from trust_insight.analysis_engine.trust_stats import TrustStats
from trust_insight.trusted_circle.models import NetworkFamiliarity, TrustedCirclePositions


class AccountType(str, Enum):
    NO_ATOM = "NoAtom"
    ATOM_WITHOUT_TRUST_TRIPLE = "AtomWithoutTrustTriple"
    ATOM_WITH_TRUST_TRIPLE = "AtomWithTrustTriple"


class OriginType(str, Enum):
    NO_ORIGIN = "NoOrigin"
    NO_ATOM = "NoAtom"
    ATOM_WITHOUT_TRUST_TRIPLE = "AtomWithoutTrustTriple"
    ATOM_WITH_TRUST_TRIPLE = "AtomWithTrustTriple"


def _check_variant(tag: Enum, atom: Any, triple: Any, analysis: Any, trust_stats: Any) -> None:
    has_atom = atom is not None
    has_triple = triple is not None
    expected = {
        "NoOrigin": (False, False),
        "NoAtom": (False, False),
        "AtomWithoutTrustTriple": (True, False),
        "AtomWithTrustTriple": (True, True),
    }[tag.value]
    if (
        (has_atom, has_triple) != expected
        or (analysis is not None) != has_triple
        or (trust_stats is not None) != has_triple
    ):
        raise ValueError(f"{type(tag).__name__}.{tag.name} inconsistent with atom/triple/analysis/trust_stats fields")


@dataclass
class AccountInsight:
    account_type: AccountType
    address: str
    atom: dict[str, Any] | None = None
    triple: dict[str, Any] | None = None
    analysis: TrustDistributionAnalysis | None = None
    trust_stats: TrustStats | None = None
    is_caip_atom: bool = False
    trusted_circle: TrustedCirclePositions | None = None
    network_familiarity: NetworkFamiliarity | None = None

    def __post_init__(self) -> None:
        _check_variant(self.account_type, self.atom, self.triple, self.analysis, self.trust_stats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_type": self.account_type.value,
            "description": describe_account_type(self.account_type),
            "address": self.address,
            "atom": self.atom,
            "triple": self.triple,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "trust_stats": self.trust_stats.to_dict() if self.trust_stats else None,
            "is_caip_atom": self.is_caip_atom,
            "trusted_circle": self.trusted_circle.to_dict() if self.trusted_circle else None,
            "network_familiarity": self.network_familiarity.to_dict() if self.network_familiarity else None,
        }


@dataclass
class OriginInsight:
    origin_type: OriginType
    origin_url: str | None
    atom: dict[str, Any] | None = None
    triple: dict[str, Any] | None = None
    analysis: TrustDistributionAnalysis | None = None
    trust_stats: TrustStats | None = None
    trusted_circle: TrustedCirclePositions | None = None

    def __post_init__(self) -> None:
        _check_variant(self.origin_type, self.atom, self.triple, self.analysis, self.trust_stats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "origin_type": self.origin_type.value,
            "origin_url": self.origin_url,
            "atom": self.atom,
            "triple": self.triple,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "trust_stats": self.trust_stats.to_dict() if self.trust_stats else None,
            "trusted_circle": self.trusted_circle.to_dict() if self.trusted_circle else None,
        }


@dataclass
class TransactionInsight:
    account: AccountInsight
    origin: OriginInsight
    user_address: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "account": self.account.to_dict(),
            "origin": self.origin.to_dict(),
            "user_address": self.user_address,
        }


def classify_account(atom: Any, triple: Any) -> AccountType:
    if atom is None:
        return AccountType.NO_ATOM
    if triple is None:
        return AccountType.ATOM_WITHOUT_TRUST_TRIPLE
    return AccountType.ATOM_WITH_TRUST_TRIPLE


def classify_origin(origin_suppressed: bool, atom: Any, triple: Any) -> OriginType:
    if origin_suppressed:
        return OriginType.NO_ORIGIN
    if atom is None:
        return OriginType.NO_ATOM
    if triple is None:
        return OriginType.ATOM_WITHOUT_TRUST_TRIPLE
    return OriginType.ATOM_WITH_TRUST_TRIPLE


def describe_account_type(account_type: AccountType) -> str:
    """Short description of each account variant; raises on an unhandled tag."""
    if account_type is AccountType.NO_ATOM:
        return "No reputation data for this address"
    if account_type is AccountType.ATOM_WITHOUT_TRUST_TRIPLE:
        return "Address known, no trust claim yet"
    if account_type is AccountType.ATOM_WITH_TRUST_TRIPLE:
        return "Address has a trust claim"
    raise AssertionError(f"Unhandled account type: {account_type!r}")
