"""
Analysis engine package: stake concentration statistics and trust classification.

Consumes stake amounts from trust triple vaults and produces distribution
profiles, a 4-tier distribution status and a combined trust level.
"""

from trust_insight.analysis_engine.concentration import (
    gini,
    nakamoto,
    top_n_percent,
)
from trust_insight.analysis_engine.distribution import (
    DistributionAnalysis,
    DistributionStatus,
    analyze_positions,
    analyze_shares,
    determine_status,
    empty_analysis,
    estimate_from_aggregate,
)
from trust_insight.analysis_engine.trust import (
    TrustDistributionAnalysis,
    TrustLevel,
    TrustLevelResult,
    analyze_trust_distribution,
    determine_trust_level,
    worse_distribution,
)
from trust_insight.analysis_engine.trust_stats import TrustStats, build_trust_stats

__all__ = [
    "gini",
    "nakamoto",
    "top_n_percent",
    "DistributionAnalysis",
    "DistributionStatus",
    "analyze_positions",
    "analyze_shares",
    "determine_status",
    "empty_analysis",
    "estimate_from_aggregate",
    "TrustDistributionAnalysis",
    "TrustLevel",
    "TrustLevelResult",
    "analyze_trust_distribution",
    "determine_trust_level",
    "worse_distribution",
    "TrustStats",
    "build_trust_stats",
]
