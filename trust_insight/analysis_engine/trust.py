"""
Trust level from opposing stake totals, combined with per-side distribution.

Support/oppose totals may be floats (already scaled) or exact integers
(fixed-point on-chain amounts). Both are converted to Fraction before the
ratio, so large 18-decimal values keep their precision and the 90% / 70%
bands are compared exactly. Negative, non-finite and non-numeric totals
count as 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Any, Iterable

from trust_insight.analysis_engine.distribution import (
    DISTRIBUTION_SNAP_COLORS,
    DistributionAnalysis,
    DistributionStatus,
    analyze_positions,
    estimate_from_aggregate,
)
from trust_insight.insight_logging import get_logger

logger = get_logger(__name__)

TRUSTED_MIN_RATIO = 90.0
MIXED_MIN_RATIO = 70.0
# Reported when nothing is staked; a neutral midpoint, not evidence of a 50/50 split
NO_STAKES_RATIO = 50.0


class TrustLevel(str, Enum):
    TRUSTED = "trusted"
    MIXED = "mixed"
    UNTRUSTED = "untrusted"
    NO_STAKES = "no-stakes"


@dataclass(frozen=True)
class TrustLevelResult:
    level: TrustLevel
    ratio: float


@dataclass
class TrustDistributionAnalysis:
    """Trust ratio plus FOR/AGAINST distribution; overall status is the more severe side."""

    trust_level: TrustLevel
    trust_ratio: float
    for_distribution: DistributionAnalysis
    against_distribution: DistributionAnalysis
    overall_distribution: DistributionStatus
    overall_snap_color: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "trust_level": self.trust_level.value,
            "trust_ratio": self.trust_ratio,
            "for_distribution": self.for_distribution.to_dict(),
            "against_distribution": self.against_distribution.to_dict(),
            "overall_distribution": self.overall_distribution.value,
            "overall_snap_color": self.overall_snap_color,
        }


def _stake_total(value: Any) -> Fraction:
    """Exact non-negative stake total; malformed values count as 0."""
    if value is None or isinstance(value, bool):
        return Fraction(0)
    if isinstance(value, int):
        return Fraction(max(0, value))
    try:
        f = float(value)
    except (TypeError, ValueError, OverflowError):
        return Fraction(0)
    if not math.isfinite(f) or f <= 0:
        return Fraction(0)
    return Fraction(f)


def _support_ratio(support: float | int, oppose: float | int) -> Fraction | None:
    for_total = _stake_total(support)
    total = for_total + _stake_total(oppose)
    if total <= 0:
        return None
    # Kept exact: a float ratio could round 89.999... up to 90
    return for_total / total * 100


def determine_trust_level(support: float | int, oppose: float | int) -> TrustLevelResult:
    """Classify the FOR share of total stake: >=90 trusted, >=70 mixed, else untrusted."""
    ratio = _support_ratio(support, oppose)
    if ratio is None:
        return TrustLevelResult(TrustLevel.NO_STAKES, NO_STAKES_RATIO)
    if ratio >= TRUSTED_MIN_RATIO:
        level = TrustLevel.TRUSTED
    elif ratio >= MIXED_MIN_RATIO:
        level = TrustLevel.MIXED
    else:
        level = TrustLevel.UNTRUSTED
    return TrustLevelResult(level, float(ratio))


def worse_distribution(a: DistributionStatus, b: DistributionStatus) -> DistributionStatus:
    """Return the more severe status; ties go to a."""
    return a if a.severity >= b.severity else b


def _side_distribution(positions: Iterable | None, aggregate: Any) -> DistributionAnalysis:
    positions = list(positions or ())
    if positions:
        return analyze_positions(positions)
    return estimate_from_aggregate(aggregate)


def analyze_trust_distribution(
    support: float | int,
    oppose: float | int,
    for_positions: Iterable | None = None,
    against_positions: Iterable | None = None,
    for_aggregate: Any = None,
    against_aggregate: Any = None,
) -> TrustDistributionAnalysis:
    """
    Combined trust and distribution analysis for a triple.

    Each side uses its individual positions when present and non-empty,
    otherwise the aggregate estimate.
    """
    trust = determine_trust_level(support, oppose)
    for_distribution = _side_distribution(for_positions, for_aggregate)
    against_distribution = _side_distribution(against_positions, against_aggregate)
    overall = worse_distribution(for_distribution.status, against_distribution.status)

    logger.debug(
        "trust_distribution_result",
        trust_level=trust.level.value,
        trust_ratio=round(trust.ratio, 2),
        for_status=for_distribution.status.value,
        against_status=against_distribution.status.value,
        overall=overall.value,
    )
    return TrustDistributionAnalysis(
        trust_level=trust.level,
        trust_ratio=trust.ratio,
        for_distribution=for_distribution,
        against_distribution=against_distribution,
        overall_distribution=overall,
        overall_snap_color=DISTRIBUTION_SNAP_COLORS[overall],
    )
