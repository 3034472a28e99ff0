"""
Data Provider: structured queries about atoms, triples and positions.

DataProvider is the contract the engine depends on; GraphQLDataProvider
implements it against the protocol's GraphQL indexer with httpx. Each method
returns the response's "data" object. No retries: failures surface as
DataProviderError and callers decide whether to degrade.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from trust_insight.core.exceptions import DataProviderError, GraphQLQueryError
from trust_insight.data_provider.queries import (
    ADDRESS_ATOMS_QUERY,
    ALL_CLAIMS_ABOUT_ATOM_QUERY,
    ATOMS_FOR_ADDRESSES_QUERY,
    ORIGIN_ATOM_QUERY,
    TRIPLE_WITH_POSITIONS_QUERY,
    USER_TRUSTED_CIRCLE_QUERY,
)
from trust_insight.insight_logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


class DataProvider(Protocol):
    async def get_user_trusted_circle(
        self, user_address: str, predicate_id: str, object_id: str
    ) -> dict[str, Any]: ...

    async def get_atoms_for_addresses(self, addresses: list[str]) -> dict[str, Any]: ...

    async def get_claims_about_atom(
        self, subject_id: str, exclude_predicate_id: str, exclude_object_id: str
    ) -> dict[str, Any]: ...

    async def get_address_atoms(self, plain_address: str, caip_address: str) -> dict[str, Any]: ...

    async def get_origin_atom(self, origin_url: str) -> dict[str, Any]: ...

    async def get_triple_with_positions(
        self, subject_id: str, predicate_id: str, object_id: str, user_address: str
    ) -> dict[str, Any]: ...


class GraphQLDataProvider:
    """GraphQL client over httpx.AsyncClient. Pass client= to share a connection pool."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GraphQLDataProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST a GraphQL document; return the "data" object."""
        try:
            r = await self._get_client().post(
                self.url,
                json={"query": query, "variables": variables},
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.warning("graphql_transport_error", url=self.url, error=str(e))
            raise DataProviderError(f"GraphQL request failed: {e}") from e

        if r.status_code < 200 or r.status_code >= 300:
            raise DataProviderError(
                f"GraphQL request failed: {r.status_code} {r.reason_phrase}",
                status_code=r.status_code,
            )
        try:
            body = r.json()
        except ValueError as e:
            raise DataProviderError("GraphQL response is not JSON", status_code=r.status_code) from e

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            first = errors[0] if isinstance(errors[0], dict) else {"message": str(errors[0])}
            raise GraphQLQueryError(f"GraphQL error: {first.get('message')}", status_code=r.status_code)
        data = body.get("data") if isinstance(body, dict) else None
        return data or {}

    async def get_user_trusted_circle(
        self, user_address: str, predicate_id: str, object_id: str
    ) -> dict[str, Any]:
        return await self.query(
            USER_TRUSTED_CIRCLE_QUERY,
            {"userAddress": user_address, "predicateId": predicate_id, "objectId": object_id},
        )

    async def get_atoms_for_addresses(self, addresses: list[str]) -> dict[str, Any]:
        return await self.query(ATOMS_FOR_ADDRESSES_QUERY, {"addresses": addresses})

    async def get_claims_about_atom(
        self, subject_id: str, exclude_predicate_id: str, exclude_object_id: str
    ) -> dict[str, Any]:
        return await self.query(
            ALL_CLAIMS_ABOUT_ATOM_QUERY,
            {
                "subjectId": subject_id,
                "excludePredicateId": exclude_predicate_id,
                "excludeObjectId": exclude_object_id,
            },
        )

    async def get_address_atoms(self, plain_address: str, caip_address: str) -> dict[str, Any]:
        return await self.query(
            ADDRESS_ATOMS_QUERY, {"plainAddress": plain_address, "caipAddress": caip_address}
        )

    async def get_origin_atom(self, origin_url: str) -> dict[str, Any]:
        return await self.query(ORIGIN_ATOM_QUERY, {"originUrl": origin_url})

    async def get_triple_with_positions(
        self, subject_id: str, predicate_id: str, object_id: str, user_address: str
    ) -> dict[str, Any]:
        return await self.query(
            TRIPLE_WITH_POSITIONS_QUERY,
            {
                "subjectId": subject_id,
                "predicateId": predicate_id,
                "objectId": object_id,
                "userAddress": user_address,
            },
        )
