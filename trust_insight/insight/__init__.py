"""
Transaction insight: account and origin trust signals for one outgoing transaction.
"""

from trust_insight.insight.models import (
    AccountInsight,
    AccountType,
    OriginInsight,
    OriginType,
    TransactionInsight,
    classify_account,
    classify_origin,
    describe_account_type,
)
from trust_insight.insight.pipeline import InsightPipeline, analyze_triple, triple_trust_stats

__all__ = [
    "AccountInsight",
    "AccountType",
    "OriginInsight",
    "OriginType",
    "TransactionInsight",
    "classify_account",
    "classify_origin",
    "describe_account_type",
    "InsightPipeline",
    "analyze_triple",
    "triple_trust_stats",
]
