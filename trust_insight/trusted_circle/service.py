"""
Trusted circle service.

Fetches the user's trusted circle (cache-aside), cross-references it with the
positions on a triple, surfaces trusted contacts with other claims about the
same subject, and resolves display labels.

Failure policy: the trusted circle fetch propagates Data Provider errors;
network familiarity and label enrichment are enhancement-only and degrade to
None / unenriched labels instead of raising.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from trust_insight.analysis_engine.trust_stats import parse_shares
from trust_insight.config.env import ChainConfig
from trust_insight.data_provider.client import DataProvider
from trust_insight.insight_logging import get_logger, short_id
from trust_insight.trusted_circle.cache import TrustedCircleCache
from trust_insight.trusted_circle.models import (
    ClaimContext,
    FamiliarContact,
    NetworkFamiliarity,
    TrustedCirclePositions,
    TrustedContact,
)
from trust_insight.utils.address_utils import display_label, format_address, is_evm_address

logger = get_logger(__name__)


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _by_stake_desc(contacts: list[TrustedContact]) -> list[TrustedContact]:
    # Exact integer comparison: shares are 18-decimal fixed-point strings.
    return sorted(contacts, key=lambda c: parse_shares(c.shares), reverse=True)


class TrustedCircleService:
    def __init__(self, provider: DataProvider, cache: TrustedCircleCache, chain: ChainConfig) -> None:
        self.provider = provider
        self.cache = cache
        self.chain = chain

    # ------------------------------------------------------------------
    # Trusted circle
    # ------------------------------------------------------------------

    @staticmethod
    def contacts_from_response(data: Mapping[str, Any] | None) -> list[TrustedContact]:
        """
        One contact per distinct subject address, first occurrence wins.

        The subject's data field is preferred when it is an EVM address
        (resolved-name atoms: label="name.eth", data="0x..."), else its label.
        """
        contacts: dict[str, TrustedContact] = {}
        for position in (data or {}).get("positions") or []:
            triple = _get(_get(position, "term"), "triple")
            subject = _get(triple, "subject")
            if not subject:
                continue
            subject_data = _get(subject, "data")
            subject_label = _get(subject, "label")
            if is_evm_address(subject_data):
                address = subject_data
            elif is_evm_address(subject_label):
                address = subject_label
            else:
                continue
            key = address.lower()
            if key not in contacts:
                contacts[key] = TrustedContact(account_id=address, label=subject_label or address)
        return list(contacts.values())

    async def get_trusted_circle(self, user_address: str) -> list[TrustedContact]:
        """Return the accounts user_address has staked FOR on the trust claim (cache-aside)."""
        cached = self.cache.get(user_address)
        if cached is not None:
            logger.debug("trusted_circle_cache_hit", user_address=short_id(user_address), contacts=len(cached))
            return cached

        data = await self.provider.get_user_trusted_circle(
            user_address,
            self.chain.has_tag_atom_id,
            self.chain.trustworthy_atom_id,
        )
        contacts = self.contacts_from_response(data)
        self.cache.set(user_address, contacts)
        logger.info("trusted_circle_fetched", user_address=short_id(user_address), contacts=len(contacts))
        return contacts

    # ------------------------------------------------------------------
    # Cross-reference
    # ------------------------------------------------------------------

    @staticmethod
    def cross_reference_positions(
        trusted_circle: list[TrustedContact],
        for_positions: Iterable[Any] | None,
        against_positions: Iterable[Any] | None,
        user_address: str | None = None,
    ) -> TrustedCirclePositions:
        """
        Keep positions held by trusted contacts, excluding the user's own.

        Label priority: trusted circle label, then the position's account
        label, then the truncated address. Each side is sorted by stake,
        highest first.
        """
        me = user_address.lower() if user_address else None
        trusted_labels = {c.account_id.lower(): c.label for c in trusted_circle}

        def _side(positions: Iterable[Any] | None) -> list[TrustedContact]:
            out: list[TrustedContact] = []
            for position in positions or ():
                account_id = _get(position, "account_id")
                if not account_id:
                    continue
                key = account_id.lower()
                if key == me or key not in trusted_labels:
                    continue
                label = (
                    trusted_labels[key]
                    or _get(_get(position, "account"), "label")
                    or format_address(account_id)
                )
                out.append(
                    TrustedContact(
                        account_id=account_id,
                        label=label,
                        shares=str(_get(position, "shares") or "0"),
                    )
                )
            return _by_stake_desc(out)

        return TrustedCirclePositions(
            for_contacts=_side(for_positions),
            against_contacts=_side(against_positions),
        )

    # ------------------------------------------------------------------
    # Network familiarity
    # ------------------------------------------------------------------

    async def network_familiarity(
        self,
        subject_id: str,
        trusted_circle: list[TrustedContact],
        already_displayed_ids: Iterable[str] = (),
        user_address: str | None = None,
    ) -> NetworkFamiliarity | None:
        """
        Trusted contacts holding a position on any other claim about subject_id.

        Returns None when nobody qualifies or when the Data Provider fails.
        """
        if not trusted_circle or not subject_id:
            return None
        try:
            data = await self.provider.get_claims_about_atom(
                subject_id,
                self.chain.has_tag_atom_id,
                self.chain.trustworthy_atom_id,
            )
        except Exception as e:
            logger.warning("network_familiarity_failed", subject_id=short_id(subject_id), error=str(e))
            return None

        me = user_address.lower() if user_address else None
        skip = {a.lower() for a in already_displayed_ids}
        trusted_labels = {c.account_id.lower(): c.label for c in trusted_circle}
        claims = (data or {}).get("triples") or []

        familiar: dict[str, FamiliarContact] = {}
        for claim in claims:
            context = ClaimContext(
                predicate_label=_get(_get(claim, "predicate"), "label") or _get(claim, "predicate_id") or "",
                object_label=_get(_get(claim, "object"), "label") or _get(claim, "object_id") or "",
            )
            holders = list(_get(claim, "positions") or []) + list(_get(claim, "counter_positions") or [])
            for position in holders:
                account_id = _get(position, "account_id")
                if not account_id:
                    continue
                key = account_id.lower()
                if key == me or key in skip or key not in trusted_labels:
                    continue
                contact = familiar.get(key)
                if contact is None:
                    contact = FamiliarContact(
                        account_id=account_id,
                        label=display_label(trusted_labels[key] or account_id),
                    )
                    familiar[key] = contact
                contact.add_claim(context)

        if not familiar:
            return None
        logger.debug(
            "network_familiarity_found",
            subject_id=short_id(subject_id),
            contacts=len(familiar),
            claims=len(claims),
        )
        return NetworkFamiliarity(
            familiar_contacts=list(familiar.values()),
            total_claims_about_address=len(claims),
        )

    # ------------------------------------------------------------------
    # Label enrichment
    # ------------------------------------------------------------------

    @staticmethod
    def resolved_label_map(atoms: Iterable[Any]) -> dict[str, str]:
        """Lowercased address (atom data) -> human-readable label, skipping atoms labelled with a bare address."""
        labels: dict[str, str] = {}
        for atom in atoms:
            label = _get(atom, "label")
            if not label or is_evm_address(label):
                continue
            from_data = (_get(atom, "data") or "").lower()
            if from_data:
                labels[from_data] = label
        return labels

    async def enrich_contact_labels(self, positions: TrustedCirclePositions) -> TrustedCirclePositions:
        """Replace contact labels with resolved names; never raises on Data Provider failure."""
        contacts = positions.for_contacts + positions.against_contacts
        if not contacts:
            return positions

        addresses = list(dict.fromkeys(c.account_id for c in contacts))
        query_addresses = list(dict.fromkeys(addresses + [a.lower() for a in addresses]))
        try:
            data = await self.provider.get_atoms_for_addresses(query_addresses)
        except Exception as e:
            logger.warning("label_enrichment_failed", contacts=len(contacts), error=str(e))
            return self._truncated(positions)

        labels = self.resolved_label_map((data or {}).get("atoms") or [])

        def _enrich(contact: TrustedContact) -> TrustedContact:
            resolved = labels.get(contact.account_id.lower())
            if resolved:
                return TrustedContact(contact.account_id, resolved, contact.shares)
            if is_evm_address(contact.label):
                return TrustedContact(contact.account_id, format_address(contact.label), contact.shares)
            return contact

        logger.debug("labels_enriched", contacts=len(contacts), resolved=len(labels))
        return TrustedCirclePositions(
            for_contacts=[_enrich(c) for c in positions.for_contacts],
            against_contacts=[_enrich(c) for c in positions.against_contacts],
        )

    @staticmethod
    def _truncated(positions: TrustedCirclePositions) -> TrustedCirclePositions:
        def _fmt(contact: TrustedContact) -> TrustedContact:
            if is_evm_address(contact.label):
                return TrustedContact(contact.account_id, format_address(contact.label), contact.shares)
            return contact

        return TrustedCirclePositions(
            for_contacts=[_fmt(c) for c in positions.for_contacts],
            against_contacts=[_fmt(c) for c in positions.against_contacts],
        )
