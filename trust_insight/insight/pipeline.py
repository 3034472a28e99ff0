"""
Insight pipeline: one transaction -> account + origin trust insight.

Account lookup, origin lookup and the user's trusted circle are fetched
concurrently and joined; everything after that is sequential. Primary-path
Data Provider errors propagate to the caller; network familiarity and label
enrichment degrade inside TrustedCircleService.
"""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import urlparse

from trust_insight.analysis_engine.trust import (
    TrustDistributionAnalysis,
    analyze_trust_distribution,
)
from trust_insight.analysis_engine.trust_stats import TrustStats, build_trust_stats, parse_shares
from trust_insight.config.env import ChainConfig
from trust_insight.data_provider.client import DataProvider
from trust_insight.insight.models import (
    AccountInsight,
    OriginInsight,
    TransactionInsight,
    classify_account,
    classify_origin,
)
from trust_insight.insight_logging import bind_user, get_logger, short_id
from trust_insight.trusted_circle.models import TrustedCirclePositions, TrustedContact
from trust_insight.trusted_circle.service import TrustedCircleService
from trust_insight.utils.address_utils import address_to_caip10, should_suppress_origin

logger = get_logger(__name__)


def _first(items: Any) -> Any:
    return items[0] if items else None


def _vault(term: dict[str, Any] | None) -> dict[str, Any]:
    return _first((term or {}).get("vaults")) or {}


def _vault_market_cap(term: dict[str, Any] | None) -> int:
    return parse_shares(_vault(term).get("market_cap"))


def _aggregate(triple: dict[str, Any], key: str) -> Any:
    return (triple.get(key) or {}).get("aggregate")


def analyze_triple(triple: dict[str, Any]) -> TrustDistributionAnalysis:
    """Trust + distribution analysis from a trust triple record (exact fixed-point market caps)."""
    return analyze_trust_distribution(
        _vault_market_cap(triple.get("term")),
        _vault_market_cap(triple.get("counter_term")),
        for_positions=triple.get("positions"),
        against_positions=triple.get("counter_positions"),
        for_aggregate=_aggregate(triple, "positions_aggregate"),
        against_aggregate=_aggregate(triple, "counter_positions_aggregate"),
    )


def triple_trust_stats(triple: dict[str, Any], chain: ChainConfig) -> TrustStats:
    """Display stats for a trust triple: market caps scaled by the chain's decimal precision."""
    return build_trust_stats(
        _vault(triple.get("term")).get("market_cap") or "0",
        _vault(triple.get("counter_term")).get("market_cap") or "0",
        triple.get("positions"),
        triple.get("counter_positions"),
        chain.currency_symbol,
        chain.decimal_precision,
    )


class InsightPipeline:
    def __init__(self, provider: DataProvider, service: TrustedCircleService, chain: ChainConfig) -> None:
        self.provider = provider
        self.service = service
        self.chain = chain

    async def _trust_triple(self, subject_id: str, user_address: str | None) -> dict[str, Any] | None:
        data = await self.provider.get_triple_with_positions(
            subject_id,
            self.chain.has_tag_atom_id,
            self.chain.trustworthy_atom_id,
            user_address or "",
        )
        return _first((data or {}).get("triples"))

    async def fetch_account(
        self, address: str, chain_id: str, user_address: str | None
    ) -> tuple[dict[str, Any] | None, dict[str, Any] | None, bool]:
        """Return (atom, trust triple, is_caip_atom); the plain-address atom wins over the CAIP-10 one."""
        data = await self.provider.get_address_atoms(address, address_to_caip10(address, chain_id))
        plain = _first((data or {}).get("plainAtoms"))
        caip = _first((data or {}).get("caipAtoms"))
        atom = plain or caip
        if atom is None:
            return None, None, False
        triple = await self._trust_triple(atom["term_id"], user_address)
        return atom, triple, plain is None

    async def fetch_origin(
        self, origin_url: str | None, user_address: str | None
    ) -> tuple[dict[str, Any] | None, dict[str, Any] | None]:
        data = await self.provider.get_origin_atom(origin_url or "")
        atom = _first((data or {}).get("atoms"))
        if atom is None:
            return None, None
        return atom, await self._trust_triple(atom["term_id"], user_address)

    async def _circle_positions(
        self,
        circle: list[TrustedContact],
        triple: dict[str, Any] | None,
        user_address: str | None,
    ) -> TrustedCirclePositions | None:
        if not circle or triple is None:
            return None
        positions = self.service.cross_reference_positions(
            circle,
            triple.get("positions") or [],
            triple.get("counter_positions") or [],
            user_address,
        )
        if positions.is_empty:
            return None
        return await self.service.enrich_contact_labels(positions)

    async def run(
        self,
        to_address: str,
        chain_id: str,
        user_address: str | None = None,
        origin_url: str | None = None,
    ) -> TransactionInsight:
        log = bind_user(user_address, __name__) if user_address else logger
        log.info(
            "insight_pipeline_start",
            to_address=short_id(to_address),
            origin=origin_url,
        )
        hostname = urlparse(origin_url).hostname if origin_url else None
        origin_suppressed = should_suppress_origin(origin_url, hostname)

        async def _no_origin() -> tuple[None, None]:
            return None, None

        async def _no_circle() -> list[TrustedContact]:
            return []

        (atom, triple, is_caip), (origin_atom, origin_triple), circle = await asyncio.gather(
            self.fetch_account(to_address, chain_id, user_address),
            _no_origin() if origin_suppressed else self.fetch_origin(origin_url, user_address),
            self.service.get_trusted_circle(user_address) if user_address else _no_circle(),
        )

        account_circle = await self._circle_positions(circle, triple, user_address)
        familiarity = None
        if atom is not None and circle:
            familiarity = await self.service.network_familiarity(
                atom["term_id"],
                circle,
                account_circle.account_ids() if account_circle else (),
                user_address,
            )

        account = AccountInsight(
            account_type=classify_account(atom, triple),
            address=to_address,
            atom=atom,
            triple=triple,
            analysis=analyze_triple(triple) if triple is not None else None,
            trust_stats=triple_trust_stats(triple, self.chain) if triple is not None else None,
            is_caip_atom=is_caip,
            trusted_circle=account_circle,
            network_familiarity=familiarity,
        )
        origin = OriginInsight(
            origin_type=classify_origin(origin_suppressed, origin_atom, origin_triple),
            origin_url=origin_url,
            atom=origin_atom,
            triple=origin_triple,
            analysis=analyze_triple(origin_triple) if origin_triple is not None else None,
            trust_stats=triple_trust_stats(origin_triple, self.chain) if origin_triple is not None else None,
            trusted_circle=await self._circle_positions(circle, origin_triple, user_address),
        )
        log.info(
            "insight_pipeline_done",
            to_address=short_id(to_address),
            account_type=account.account_type.value,
            origin_type=origin.origin_type.value,
            trust_level=account.analysis.trust_level.value if account.analysis else None,
        )
        return TransactionInsight(account=account, origin=origin, user_address=user_address)
