"""
Stake distribution analysis for one side (FOR or AGAINST) of a trust triple.

Turns raw stake amounts into a concentration profile (Gini, Nakamoto,
top-1 / top-3 share) and a 4-tier status. The status is a pure function of
(gini, top1_percent, staker_count); colors and labels are a pure function of
the status. The UI decides how to display it.

Two paths share one result type:
- exact: analyze_shares / analyze_positions over individual stake amounts;
- estimate: estimate_from_aggregate, a coarse count-based heuristic used only
  when individual positions were not fetched. Results from this path carry
  is_estimate=True and must not be presented as measured values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from trust_insight.analysis_engine.concentration import (
    gini as calculate_gini,
    nakamoto as calculate_nakamoto,
    positive_values,
    top_n_percent,
)
from trust_insight.insight_logging import get_logger

logger = get_logger(__name__)


class DistributionStatus(str, Enum):
    WELL_DISTRIBUTED = "well-distributed"
    MODERATE = "moderate"
    CONCENTRATED = "concentrated"
    WHALE_DOMINATED = "whale-dominated"

    @property
    def severity(self) -> int:
        """Position in the fixed order well-distributed < moderate < concentrated < whale-dominated."""
        return STATUS_ORDER.index(self)


STATUS_ORDER = (
    DistributionStatus.WELL_DISTRIBUTED,
    DistributionStatus.MODERATE,
    DistributionStatus.CONCENTRATED,
    DistributionStatus.WHALE_DOMINATED,
)

# Gini upper bounds (inclusive) per status
GINI_WELL_DISTRIBUTED = 0.35
GINI_MODERATE = 0.55
GINI_CONCENTRATED = 0.75

# Top-1 share bands (percent): <30 healthy, <50 acceptable, <80 concerning, >=80 whale
TOP1_WELL_DISTRIBUTED = 30.0
TOP1_MODERATE = 50.0
TOP1_CONCENTRATED = 80.0

MIN_STAKERS_FOR_ANALYSIS = 3

DISTRIBUTION_THRESHOLDS: dict[str, Any] = {
    "gini": {
        "well_distributed": GINI_WELL_DISTRIBUTED,
        "moderate": GINI_MODERATE,
        "concentrated": GINI_CONCENTRATED,
    },
    "top1": {
        "well_distributed": TOP1_WELL_DISTRIBUTED,
        "moderate": TOP1_MODERATE,
        "concentrated": TOP1_CONCENTRATED,
    },
    "min_stakers_for_analysis": MIN_STAKERS_FOR_ANALYSIS,
}

# Wallet UI color tokens: default | alternative | muted | error | success | warning
DISTRIBUTION_SNAP_COLORS: dict[DistributionStatus, str] = {
    DistributionStatus.WELL_DISTRIBUTED: "success",
    DistributionStatus.MODERATE: "warning",
    DistributionStatus.CONCENTRATED: "warning",
    DistributionStatus.WHALE_DOMINATED: "error",
}

DISTRIBUTION_HEX_COLORS: dict[DistributionStatus, str] = {
    DistributionStatus.WELL_DISTRIBUTED: "#22c55e",
    DistributionStatus.MODERATE: "#eab308",
    DistributionStatus.CONCENTRATED: "#f97316",
    DistributionStatus.WHALE_DOMINATED: "#ef4444",
}

DISTRIBUTION_LABELS: dict[DistributionStatus, str] = {
    DistributionStatus.WELL_DISTRIBUTED: "Well Distributed",
    DistributionStatus.MODERATE: "Moderate",
    DistributionStatus.CONCENTRATED: "Concentrated",
    DistributionStatus.WHALE_DOMINATED: "Whale Dominated",
}

DISTRIBUTION_SHORT_LABELS: dict[DistributionStatus, str] = {
    DistributionStatus.WELL_DISTRIBUTED: "🟢 Distributed",
    DistributionStatus.MODERATE: "🟡 Moderate",
    DistributionStatus.CONCENTRATED: "⚠️ Concentrated",
    DistributionStatus.WHALE_DOMINATED: "⛔️ Whale",
}

NO_STAKES_LABEL = "No Stakes"
NO_STAKES_SHORT_LABEL = "None"


@dataclass
class DistributionAnalysis:
    """
    Concentration profile of one vault.

    gini: 0 = equal, 1 = one holder has everything.
    nakamoto: minimum stakers controlling 51%.
    top1_percent / top3_percent: share (0-100) held by the largest 1 / 3 stakers.
    is_estimate: True when derived from aggregate count only (gini/top1 are heuristics).
    """

    gini: float
    nakamoto: int
    top1_percent: float
    top3_percent: float
    staker_count: int
    total_shares: float
    status: DistributionStatus
    snap_color: str
    hex_color: str
    label: str
    short_label: str
    is_estimate: bool = False

    @property
    def has_stakes(self) -> bool:
        return self.staker_count > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "gini": self.gini,
            "nakamoto": self.nakamoto,
            "top1_percent": self.top1_percent,
            "top3_percent": self.top3_percent,
            "staker_count": self.staker_count,
            "total_shares": self.total_shares,
            "status": self.status.value,
            "snap_color": self.snap_color,
            "hex_color": self.hex_color,
            "label": self.label,
            "short_label": self.short_label,
            "is_estimate": self.is_estimate,
        }


def determine_status(gini: float, top1_percent: float, staker_count: int) -> DistributionStatus:
    """
    Map concentration metrics to a distribution status. First match wins:

    1. top staker holds >= 80% -> whale-dominated, for any staker count;
    2. no stakers -> well-distributed (neutral; callers show "No Stakes" separately);
    3. fewer than 3 stakers -> concentrated. One staker always hits rule 1
       (top1 = 100%); two stakers reaching here hold top1 in [50%, 80%);
    4. otherwise Gini bands (upper bounds inclusive).
    """
    if top1_percent >= TOP1_CONCENTRATED:
        return DistributionStatus.WHALE_DOMINATED
    if staker_count == 0:
        return DistributionStatus.WELL_DISTRIBUTED
    if staker_count < MIN_STAKERS_FOR_ANALYSIS:
        return DistributionStatus.CONCENTRATED
    if gini <= GINI_WELL_DISTRIBUTED:
        return DistributionStatus.WELL_DISTRIBUTED
    if gini <= GINI_MODERATE:
        return DistributionStatus.MODERATE
    if gini <= GINI_CONCENTRATED:
        return DistributionStatus.CONCENTRATED
    return DistributionStatus.WHALE_DOMINATED


def _with_presentation(status: DistributionStatus, **metrics: Any) -> DistributionAnalysis:
    return DistributionAnalysis(
        status=status,
        snap_color=DISTRIBUTION_SNAP_COLORS[status],
        hex_color=DISTRIBUTION_HEX_COLORS[status],
        label=DISTRIBUTION_LABELS[status],
        short_label=DISTRIBUTION_SHORT_LABELS[status],
        **metrics,
    )


def empty_analysis() -> DistributionAnalysis:
    """Zeroed analysis for a vault with no stakes; status is the neutral default."""
    status = DistributionStatus.WELL_DISTRIBUTED
    return DistributionAnalysis(
        gini=0.0,
        nakamoto=0,
        top1_percent=0.0,
        top3_percent=0.0,
        staker_count=0,
        total_shares=0.0,
        status=status,
        snap_color=DISTRIBUTION_SNAP_COLORS[status],
        hex_color=DISTRIBUTION_HEX_COLORS[status],
        label=NO_STAKES_LABEL,
        short_label=NO_STAKES_SHORT_LABEL,
    )


def analyze_shares(shares: Iterable) -> DistributionAnalysis:
    """
    Full distribution analysis over stake amounts.

    >>> analyze_shares([1424, 95, 0.01]).status.value
    'whale-dominated'
    """
    values = positive_values(shares)
    if not values:
        return empty_analysis()

    g = calculate_gini(values)
    top1 = top_n_percent(values, 1)
    status = determine_status(g, top1, len(values))
    return _with_presentation(
        status,
        gini=g,
        nakamoto=calculate_nakamoto(values),
        top1_percent=top1,
        top3_percent=top_n_percent(values, 3),
        staker_count=len(values),
        total_shares=sum(values),
    )


def _position_shares(position: Any) -> Any:
    if isinstance(position, Mapping):
        return position.get("shares")
    return getattr(position, "shares", None)


def analyze_positions(positions: Iterable | None) -> DistributionAnalysis:
    """Analyze positions ({shares: number | decimal string}); unparsable or non-positive shares are dropped."""
    return analyze_shares(_position_shares(p) for p in positions or ())


def _aggregate_field(aggregate: Any, name: str) -> Any:
    if isinstance(aggregate, Mapping):
        return aggregate.get(name)
    return getattr(aggregate, name, None)


def _aggregate_shares(aggregate: Any, name: str) -> float:
    part = _aggregate_field(aggregate, name)
    if part is None:
        return 0.0
    raw = part.get("shares") if isinstance(part, Mapping) else getattr(part, "shares", None)
    values = positive_values([raw])
    return values[0] if values else 0.0


def estimate_top1_percent(count: int) -> float:
    """Heuristic top-1 share from staker count alone (monotonically non-increasing in count)."""
    if count <= 1:
        return 100.0
    if count == 2:
        return 70.0
    if count <= 5:
        return 100 / math.sqrt(count)
    return max(20.0, 100 / count**0.7)


def estimate_gini(count: int) -> float:
    """Heuristic Gini from staker count alone."""
    if count <= 1:
        return 0.0
    if count == 2:
        return 0.5
    if count <= 5:
        return 0.6
    if count <= 10:
        return 0.5
    return 0.4


def estimate_from_aggregate(aggregate: Any) -> DistributionAnalysis:
    """
    Approximate a distribution from {count, sum: {shares}, avg: {shares}}.

    Used only when individual positions are unavailable. gini and top1 come
    from a fixed curve over count that was not fit to observed data; the
    result is flagged is_estimate=True. Keep callers on this function's
    interface so the heuristic can be swapped without touching them.
    """
    if not aggregate:
        return empty_analysis()
    try:
        count = int(_aggregate_field(aggregate, "count") or 0)
    except (TypeError, ValueError):
        count = 0
    total_shares = _aggregate_shares(aggregate, "sum")
    if count <= 0 or total_shares == 0:
        return empty_analysis()

    top1 = estimate_top1_percent(count)
    g = estimate_gini(count)
    status = determine_status(g, top1, count)
    logger.debug("distribution_estimated", count=count, status=status.value, top1_percent=round(top1, 2))
    return _with_presentation(
        status,
        gini=g,
        nakamoto=1 if count == 1 else math.ceil(count * 0.3),
        top1_percent=top1,
        top3_percent=min(100.0, top1 * 1.3),
        staker_count=count,
        total_shares=total_shares,
        is_estimate=True,
    )
