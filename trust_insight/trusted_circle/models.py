"""
Trusted circle value objects.

The trusted circle is the set of accounts the current user has staked FOR
on the canonical trust claim (hasTag trustworthy). All types serialize to
plain dicts for the rendering layer and the state store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class TrustedContact:
    """A trusted account: address, display label, and stake as an exact decimal string."""

    account_id: str
    label: str
    shares: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"account_id": self.account_id, "label": self.label}
        if self.shares is not None:
            out["shares"] = self.shares
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrustedContact":
        return cls(
            account_id=str(data["account_id"]),
            label=str(data.get("label") or data["account_id"]),
            shares=data.get("shares"),
        )


@dataclass
class CachedTrustedCircle:
    """One cache entry per user address; overwritten wholesale on refresh."""

    contacts: list[TrustedContact]
    timestamp: float
    """Epoch seconds when the entry was written."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "contacts": [c.to_dict() for c in self.contacts],
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CachedTrustedCircle":
        return cls(
            contacts=[TrustedContact.from_dict(c) for c in data["contacts"]],
            timestamp=float(data["timestamp"]),
        )


@dataclass
class TrustedCirclePositions:
    """Trusted contacts holding a position on one triple, by side, highest stake first."""

    for_contacts: list[TrustedContact] = field(default_factory=list)
    against_contacts: list[TrustedContact] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.for_contacts and not self.against_contacts

    def account_ids(self) -> set[str]:
        """Lowercased ids of every contact on either side."""
        return {c.account_id.lower() for c in self.for_contacts + self.against_contacts}

    def to_dict(self) -> dict[str, Any]:
        return {
            "for_contacts": [c.to_dict() for c in self.for_contacts],
            "against_contacts": [c.to_dict() for c in self.against_contacts],
        }


@dataclass(frozen=True)
class ClaimContext:
    """A claim a familiar contact holds a position on, e.g. ("has tag", "DeFi Protocol")."""

    predicate_label: str
    object_label: str

    def to_dict(self) -> dict[str, Any]:
        return {"predicate_label": self.predicate_label, "object_label": self.object_label}


@dataclass
class FamiliarContact:
    """Trusted contact with an opinion on some non-trust claim about the target."""

    account_id: str
    label: str
    claims: list[ClaimContext] = field(default_factory=list)

    def add_claim(self, claim: ClaimContext) -> None:
        if claim not in self.claims:
            self.claims.append(claim)

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "label": self.label,
            "claims": [c.to_dict() for c in self.claims],
        }


@dataclass
class NetworkFamiliarity:
    familiar_contacts: list[FamiliarContact]
    total_claims_about_address: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "familiar_contacts": [c.to_dict() for c in self.familiar_contacts],
            "total_claims_about_address": self.total_claims_about_address,
        }
