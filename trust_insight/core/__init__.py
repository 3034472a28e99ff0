"""
Core cross-cutting concerns: exception taxonomy shared by the engine,
the Data Provider client and the insight pipeline.
"""

from trust_insight.core.exceptions import (
    ConfigError,
    DataProviderError,
    GraphQLQueryError,
    TrustInsightError,
)

__all__ = [
    "ConfigError",
    "DataProviderError",
    "GraphQLQueryError",
    "TrustInsightError",
]
