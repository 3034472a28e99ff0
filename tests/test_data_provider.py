"""
Tests for GraphQLDataProvider against httpx.MockTransport (no network).
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from trust_insight.core.exceptions import DataProviderError, GraphQLQueryError
from trust_insight.data_provider.client import GraphQLDataProvider
from trust_insight.data_provider.queries import USER_TRUSTED_CIRCLE_QUERY

URL = "https://indexer.test/v1/graphql"


def _provider(handler) -> GraphQLDataProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GraphQLDataProvider(URL, client=client)


async def _call(provider: GraphQLDataProvider, method: str, *args):
    try:
        return await getattr(provider, method)(*args)
    finally:
        await provider._client.aclose()


def test_success_returns_data_and_sends_variables():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"positions": [{"id": "p1"}]}})

    data = asyncio.run(_call(_provider(handler), "get_user_trusted_circle", "0xabc", "pred", "obj"))

    assert data == {"positions": [{"id": "p1"}]}
    assert seen["url"] == URL
    assert seen["body"]["query"] == USER_TRUSTED_CIRCLE_QUERY
    assert seen["body"]["variables"] == {"userAddress": "0xabc", "predicateId": "pred", "objectId": "obj"}


def test_missing_data_is_empty_dict():
    def handler(request):
        return httpx.Response(200, json={"data": None})

    assert asyncio.run(_call(_provider(handler), "get_origin_atom", "https://app.example")) == {}


def test_graphql_errors_raise_first_message():
    def handler(request):
        return httpx.Response(200, json={"errors": [{"message": "field not found"}, {"message": "other"}]})

    with pytest.raises(GraphQLQueryError, match="GraphQL error: field not found"):
        asyncio.run(_call(_provider(handler), "get_atoms_for_addresses", ["0xabc"]))


def test_non_2xx_raises_with_status_code():
    def handler(request):
        return httpx.Response(500, text="boom")

    with pytest.raises(DataProviderError) as exc_info:
        asyncio.run(_call(_provider(handler), "get_address_atoms", "0xabc", "caip10:eip155:1:0xabc"))
    assert exc_info.value.status_code == 500
    assert not isinstance(exc_info.value, GraphQLQueryError)


def test_non_json_body_raises():
    def handler(request):
        return httpx.Response(200, text="<html>")

    with pytest.raises(DataProviderError, match="not JSON"):
        asyncio.run(_call(_provider(handler), "get_origin_atom", "https://app.example"))


def test_transport_error_becomes_data_provider_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DataProviderError, match="connection refused"):
        asyncio.run(_call(_provider(handler), "get_claims_about_atom", "s", "p", "o"))


def test_context_manager_closes_owned_client():
    async def run():
        async with GraphQLDataProvider(URL, timeout=1.0) as provider:
            client = provider._get_client()
            assert provider._get_client() is client
        return provider, client

    provider, client = asyncio.run(run())
    assert client.is_closed
    assert provider._client is None


def test_shared_client_is_not_closed():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))

    async def run():
        async with GraphQLDataProvider(URL, client=client):
            pass
        closed = client.is_closed
        await client.aclose()
        return closed

    assert asyncio.run(run()) is False
