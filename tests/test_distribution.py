"""
Tests for distribution analysis: status classification, presentation maps,
exact analysis over positions and the aggregate-only estimate.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from trust_insight.analysis_engine.distribution import (
    DISTRIBUTION_HEX_COLORS,
    DISTRIBUTION_LABELS,
    DISTRIBUTION_SHORT_LABELS,
    DISTRIBUTION_SNAP_COLORS,
    DistributionStatus,
    analyze_positions,
    analyze_shares,
    determine_status,
    empty_analysis,
    estimate_from_aggregate,
    estimate_top1_percent,
)


def test_whale_rule_applies_for_any_staker_count():
    assert determine_status(0.1, 80, 50) == DistributionStatus.WHALE_DOMINATED
    assert determine_status(0.0, 100, 1) == DistributionStatus.WHALE_DOMINATED
    assert determine_status(0.0, 79.99, 50) == DistributionStatus.WELL_DISTRIBUTED


def test_zero_stakers_is_neutral():
    assert determine_status(0.0, 0.0, 0) == DistributionStatus.WELL_DISTRIBUTED


def test_few_stakers_is_concentrated():
    assert determine_status(0.0, 60, 2) == DistributionStatus.CONCENTRATED


def test_gini_band_boundaries_are_inclusive():
    assert determine_status(0.35, 20, 10) == DistributionStatus.WELL_DISTRIBUTED
    assert determine_status(0.36, 20, 10) == DistributionStatus.MODERATE
    assert determine_status(0.55, 20, 10) == DistributionStatus.MODERATE
    assert determine_status(0.75, 20, 10) == DistributionStatus.CONCENTRATED
    assert determine_status(0.76, 20, 10) == DistributionStatus.WHALE_DOMINATED


def test_presentation_maps_cover_every_status():
    for status in DistributionStatus:
        assert status in DISTRIBUTION_SNAP_COLORS
        assert status in DISTRIBUTION_HEX_COLORS
        assert status in DISTRIBUTION_LABELS
        assert status in DISTRIBUTION_SHORT_LABELS
    assert DISTRIBUTION_SNAP_COLORS[DistributionStatus.WHALE_DOMINATED] == "error"
    assert DISTRIBUTION_SNAP_COLORS[DistributionStatus.WELL_DISTRIBUTED] == "success"


def test_severity_order():
    ordered = sorted(DistributionStatus, key=lambda s: s.severity)
    assert [s.value for s in ordered] == ["well-distributed", "moderate", "concentrated", "whale-dominated"]


def test_single_whale_among_small_stakers():
    """One dominant staker with two tiny ones is whale-dominated."""
    result = analyze_shares([1424, 95, 0.01])
    assert result.status == DistributionStatus.WHALE_DOMINATED
    assert result.staker_count == 3
    assert result.top1_percent > 90
    assert result.nakamoto == 1
    assert result.label == "Whale Dominated"
    assert result.is_estimate is False


def test_two_equal_stakers_are_concentrated():
    """A 50/50 split between two stakers is not well distributed: too few stakers."""
    result = analyze_shares([50, 50])
    assert result.gini == 0
    assert result.top1_percent == pytest.approx(50)
    assert result.status == DistributionStatus.CONCENTRATED


def test_many_equal_stakers_are_well_distributed():
    result = analyze_shares([10] * 12)
    assert result.status == DistributionStatus.WELL_DISTRIBUTED
    assert result.nakamoto == 7
    assert result.top3_percent == pytest.approx(25)
    assert result.total_shares == pytest.approx(120)


def test_empty_input_is_no_stakes():
    for result in (analyze_shares([]), analyze_positions(None), analyze_positions([{"shares": "0"}])):
        assert result.staker_count == 0
        assert result.has_stakes is False
        assert result.label == "No Stakes"
        assert result.short_label == "None"
        assert result.status == DistributionStatus.WELL_DISTRIBUTED
    assert empty_analysis().to_dict()["status"] == "well-distributed"


def test_analyze_positions_accepts_mappings_and_objects():
    positions = [
        {"shares": "1000"},
        SimpleNamespace(shares=1000),
        {"shares": "garbage"},
        {"shares": "-5"},
        {},
        {"shares": 1000},
    ]
    result = analyze_positions(positions)
    assert result.staker_count == 3
    assert result.gini == 0
    assert result.status == DistributionStatus.WELL_DISTRIBUTED


def test_estimate_returns_empty_without_usable_aggregate():
    assert estimate_from_aggregate(None).staker_count == 0
    assert estimate_from_aggregate({"count": 0, "sum": {"shares": "10"}}).staker_count == 0
    assert estimate_from_aggregate({"count": 5, "sum": {"shares": "0"}}).staker_count == 0
    assert estimate_from_aggregate({"count": 5}).label == "No Stakes"


@pytest.mark.parametrize(
    "count,expected",
    [
        (1, DistributionStatus.WHALE_DOMINATED),
        (2, DistributionStatus.CONCENTRATED),
        (4, DistributionStatus.CONCENTRATED),
        (8, DistributionStatus.MODERATE),
        (20, DistributionStatus.MODERATE),
    ],
)
def test_estimate_status_by_count(count, expected):
    result = estimate_from_aggregate({"count": count, "sum": {"shares": "1000"}, "avg": {"shares": "10"}})
    assert result.status == expected
    assert result.staker_count == count
    assert result.is_estimate is True
    assert result.total_shares == pytest.approx(1000)


def test_estimate_nakamoto_and_top3():
    single = estimate_from_aggregate({"count": 1, "sum": {"shares": 5}})
    assert single.nakamoto == 1
    assert single.top3_percent == 100
    many = estimate_from_aggregate({"count": 7, "sum": {"shares": 5}})
    assert many.nakamoto == 3
    assert many.top3_percent == pytest.approx(min(100.0, many.top1_percent * 1.3))


def test_estimate_top1_is_non_increasing():
    values = [estimate_top1_percent(c) for c in range(1, 60)]
    assert all(a >= b for a, b in zip(values, values[1:]))
    assert min(values) >= 20


def test_analyze_shares_with_int_beyond_float_range():
    result = analyze_shares([10**400, 1])
    assert result.staker_count == 1
    assert result.status == DistributionStatus.WHALE_DOMINATED
