"""
Data Provider client for the reputation protocol indexer (GraphQL).
"""

from trust_insight.data_provider.client import DataProvider, GraphQLDataProvider

__all__ = ["DataProvider", "GraphQLDataProvider"]
