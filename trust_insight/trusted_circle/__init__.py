"""
Trusted circle: accounts the user has staked FOR on the trust claim,
cross-referenced against the positions on a given triple.
"""

from trust_insight.trusted_circle.cache import CACHE_NAMESPACE, TrustedCircleCache
from trust_insight.trusted_circle.models import (
    CachedTrustedCircle,
    ClaimContext,
    FamiliarContact,
    NetworkFamiliarity,
    TrustedCirclePositions,
    TrustedContact,
)
from trust_insight.trusted_circle.service import TrustedCircleService

__all__ = [
    "CACHE_NAMESPACE",
    "TrustedCircleCache",
    "CachedTrustedCircle",
    "ClaimContext",
    "FamiliarContact",
    "NetworkFamiliarity",
    "TrustedCirclePositions",
    "TrustedContact",
    "TrustedCircleService",
]
