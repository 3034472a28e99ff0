"""
End-to-end tests for the insight pipeline with a scripted Data Provider,
plus the command-line entry point.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from conftest import ALICE, BOB, CAROL, STRANGER, USER, FakeProvider, trusted_circle_response
from trust_insight.analysis_engine.distribution import DistributionStatus
from trust_insight.analysis_engine.trust import TrustLevel
from trust_insight.cli import main
from trust_insight.core.exceptions import DataProviderError
from trust_insight.insight.models import (
    AccountInsight,
    AccountType,
    OriginInsight,
    OriginType,
    TransactionInsight,
    describe_account_type,
)
from trust_insight.insight.pipeline import InsightPipeline, analyze_triple

WEI = 10**18
ATOM = {"term_id": "atom-1", "label": STRANGER, "data": STRANGER}


def _trust_triple():
    return {
        "term_id": "triple-1",
        "term": {"vaults": [{"market_cap": str(9 * WEI)}]},
        "counter_term": {"vaults": [{"market_cap": str(1 * WEI)}]},
        "positions": [{"account_id": ALICE, "shares": str(9 * WEI)}],
        "counter_positions": [{"account_id": BOB, "shares": str(1 * WEI)}],
        "positions_aggregate": {"aggregate": {"count": 1, "sum": {"shares": str(9 * WEI)}}},
        "counter_positions_aggregate": {"aggregate": {"count": 1, "sum": {"shares": str(1 * WEI)}}},
    }


def _provider(**overrides):
    responses = {
        "get_address_atoms": {"plainAtoms": [ATOM], "caipAtoms": []},
        "get_triple_with_positions": {"triples": [_trust_triple()]},
        "get_user_trusted_circle": trusted_circle_response(("alice.eth", ALICE), (BOB, BOB), ("carol", CAROL)),
        "get_claims_about_atom": {
            "triples": [
                {
                    "predicate": {"label": "has tag"},
                    "object": {"label": "Exchange"},
                    "positions": [{"account_id": ALICE}, {"account_id": CAROL}],
                    "counter_positions": [],
                }
            ]
        },
        "get_atoms_for_addresses": {"atoms": []},
        "get_origin_atom": {"atoms": []},
    }
    responses.update(overrides)
    return FakeProvider(**responses)


def _pipeline(make_service, chain, provider):
    return InsightPipeline(provider, make_service(provider), chain)


def test_full_insight_with_trusted_circle(make_service, chain):
    provider = _provider()
    insight = asyncio.run(
        _pipeline(make_service, chain, provider).run(STRANGER, "eip155:1", user_address=USER, origin_url="metamask")
    )

    account = insight.account
    assert account.account_type == AccountType.ATOM_WITH_TRUST_TRIPLE
    assert account.is_caip_atom is False
    assert account.analysis.trust_level == TrustLevel.TRUSTED
    assert account.analysis.trust_ratio == 90.0
    assert account.analysis.overall_distribution == DistributionStatus.WHALE_DOMINATED

    stats = account.trust_stats
    assert stats.trust_percent == pytest.approx(90)
    assert stats.trust_icon == "🟢"
    assert stats.top_staker_percent == pytest.approx(100)
    assert stats.total_staked_display == f"10 {chain.currency_symbol}"
    assert (stats.for_count, stats.against_count) == (1, 1)
    assert stats.summary == "Limited data, dominated by one staker"

    circle = account.trusted_circle
    assert [c.label for c in circle.for_contacts] == ["alice.eth"]
    assert [c.label for c in circle.against_contacts] == ["0xB0B0...0002"]

    # ALICE already shown in the trusted circle; only CAROL is "familiar"
    familiar = account.network_familiarity
    assert [c.account_id for c in familiar.familiar_contacts] == [CAROL]
    assert familiar.total_claims_about_address == 1

    assert insight.origin.origin_type == OriginType.NO_ORIGIN
    assert insight.origin.trust_stats is None
    assert provider.count("get_origin_atom") == 0
    plain, caip = provider.calls[[n for n, _ in provider.calls].index("get_address_atoms")][1]
    assert plain == STRANGER
    assert caip == f"caip10:eip155:1:{STRANGER}"

    out = json.loads(json.dumps(insight.to_dict()))
    assert out["account"]["description"] == "Address has a trust claim"
    assert out["account"]["trust_stats"]["trust_icon"] == "🟢"


def test_no_atom_and_unknown_origin_without_user(make_service, chain):
    provider = _provider(get_address_atoms={"plainAtoms": [], "caipAtoms": []})
    insight = asyncio.run(
        _pipeline(make_service, chain, provider).run(STRANGER, "eip155:1", origin_url="https://app.example")
    )
    assert insight.account.account_type == AccountType.NO_ATOM
    assert insight.account.analysis is None
    assert insight.account.trust_stats is None
    assert insight.account.trusted_circle is None
    assert insight.origin.origin_type == OriginType.NO_ATOM
    assert provider.count("get_user_trusted_circle") == 0
    assert provider.count("get_triple_with_positions") == 0


def test_caip_atom_without_trust_triple(make_service, chain):
    provider = _provider(
        get_address_atoms={"plainAtoms": [], "caipAtoms": [ATOM]},
        get_triple_with_positions={"triples": []},
    )
    insight = asyncio.run(_pipeline(make_service, chain, provider).run(STRANGER, "eip155:1", user_address=USER))
    assert insight.account.account_type == AccountType.ATOM_WITHOUT_TRUST_TRIPLE
    assert insight.account.is_caip_atom is True
    assert insight.account.trusted_circle is None
    # nothing displayed yet, so both ALICE and CAROL are familiar
    ids = [c.account_id for c in insight.account.network_familiarity.familiar_contacts]
    assert ids == [ALICE, CAROL]


def test_origin_with_trust_triple(make_service, chain):
    provider = _provider(get_origin_atom={"atoms": [{"term_id": "origin-1", "label": "https://app.example"}]})
    insight = asyncio.run(
        _pipeline(make_service, chain, provider).run(
            STRANGER, "eip155:1", user_address=USER, origin_url="https://app.example"
        )
    )
    assert insight.origin.origin_type == OriginType.ATOM_WITH_TRUST_TRIPLE
    assert insight.origin.analysis.trust_level == TrustLevel.TRUSTED
    assert insight.origin.trust_stats.has_stakes is True
    assert [c.account_id for c in insight.origin.trusted_circle.for_contacts] == [ALICE]


def test_localhost_origin_is_suppressed(make_service, chain):
    provider = _provider()
    insight = asyncio.run(
        _pipeline(make_service, chain, provider).run(STRANGER, "eip155:1", origin_url="http://localhost:3000")
    )
    assert insight.origin.origin_type == OriginType.NO_ORIGIN
    assert provider.count("get_origin_atom") == 0


def test_primary_lookup_failure_propagates(make_service, chain):
    provider = _provider(get_address_atoms=DataProviderError("HTTP error: 502", status_code=502))
    with pytest.raises(DataProviderError):
        asyncio.run(_pipeline(make_service, chain, provider).run(STRANGER, "eip155:1"))


def test_analyze_triple_without_vaults_is_no_stakes():
    result = analyze_triple({"term": {"vaults": []}, "counter_term": None})
    assert result.trust_level == TrustLevel.NO_STAKES
    assert result.trust_ratio == 50


def test_inconsistent_variant_rejected():
    with pytest.raises(ValueError):
        AccountInsight(account_type=AccountType.NO_ATOM, address=STRANGER, atom=ATOM)
    with pytest.raises(ValueError):
        OriginInsight(origin_type=OriginType.ATOM_WITH_TRUST_TRIPLE, origin_url="x", atom=ATOM)
    triple = _trust_triple()
    with pytest.raises(ValueError):
        AccountInsight(
            account_type=AccountType.ATOM_WITH_TRUST_TRIPLE,
            address=STRANGER,
            atom=ATOM,
            triple=triple,
            analysis=analyze_triple(triple),
        )


def test_describe_account_type_covers_all_variants():
    for account_type in AccountType:
        assert describe_account_type(account_type)


# ----------------------------------------------------------------------
# CLI
# ----------------------------------------------------------------------


def test_cli_prints_insight_json(capsys, monkeypatch):
    monkeypatch.delenv("INSIGHT_NETWORK", raising=False)
    monkeypatch.delenv("INSIGHT_STATE_DB_PATH", raising=False)
    insight = TransactionInsight(
        account=AccountInsight(account_type=AccountType.NO_ATOM, address=STRANGER),
        origin=OriginInsight(origin_type=OriginType.NO_ORIGIN, origin_url=None),
    )
    with patch("trust_insight.cli.run_insight", new=AsyncMock(return_value=insight)) as run:
        code = main(["--to", STRANGER])

    assert code == 0
    args = run.call_args.args
    assert args[1:] == (STRANGER, "eip155:1", None, None)
    # stdout carries only the insight JSON
    out = json.loads(capsys.readouterr().out)
    assert out["account"]["account_type"] == "NoAtom"
    assert out["account"]["description"] == "No reputation data for this address"


def test_cli_returns_error_code_on_bad_config(monkeypatch):
    monkeypatch.setenv("INSIGHT_NETWORK", "devnet")
    with patch("trust_insight.cli.run_insight", new=AsyncMock()) as run:
        assert main(["--to", STRANGER]) == 1
    run.assert_not_called()
