"""
Application-level exceptions.

Data Provider failures on primary paths (trusted circle fetch, positions fetch)
surface as DataProviderError; secondary paths catch it and degrade.
Statistical functions never raise.
"""

from __future__ import annotations


class TrustInsightError(Exception):
    """Base class for all trust insight errors."""


class ConfigError(TrustInsightError):
    """Invalid configuration value (network name, TTL, timeout)."""


class DataProviderError(TrustInsightError):
    """Data Provider transport failure or non-2xx response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GraphQLQueryError(DataProviderError):
    """The Data Provider answered but the GraphQL response carried errors."""
