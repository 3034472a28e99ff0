"""
Pytest fixtures for trust insight tests: in-memory state store, controllable
clock and a scripted Data Provider. No network.
"""

from __future__ import annotations

from typing import Any

import pytest

from trust_insight.config.env import INTUITION_TESTNET
from trust_insight.database.state_store import MemoryStateStore
from trust_insight.trusted_circle.cache import TrustedCircleCache
from trust_insight.trusted_circle.service import TrustedCircleService

USER = "0x1111111111111111111111111111111111111111"
ALICE = "0xA11CE00000000000000000000000000000000001"
BOB = "0xB0B0000000000000000000000000000000000002"
CAROL = "0xCA70100000000000000000000000000000000003"
STRANGER = "0x5772A46E00000000000000000000000000000004"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """
    Scripted Data Provider. Set a response (dict) or an exception per method;
    every call is recorded in .calls as (method_name, args).
    """

    def __init__(self, **responses: Any) -> None:
        self.responses = responses
        self.calls: list[tuple[str, tuple]] = []

    async def _answer(self, name: str, *args: Any) -> dict[str, Any]:
        self.calls.append((name, args))
        result = self.responses.get(name, {})
        if isinstance(result, Exception):
            raise result
        return result

    def count(self, name: str) -> int:
        return sum(1 for n, _ in self.calls if n == name)

    async def get_user_trusted_circle(self, user_address, predicate_id, object_id):
        return await self._answer("get_user_trusted_circle", user_address, predicate_id, object_id)

    async def get_atoms_for_addresses(self, addresses):
        return await self._answer("get_atoms_for_addresses", addresses)

    async def get_claims_about_atom(self, subject_id, exclude_predicate_id, exclude_object_id):
        return await self._answer("get_claims_about_atom", subject_id, exclude_predicate_id, exclude_object_id)

    async def get_address_atoms(self, plain_address, caip_address):
        return await self._answer("get_address_atoms", plain_address, caip_address)

    async def get_origin_atom(self, origin_url):
        return await self._answer("get_origin_atom", origin_url)

    async def get_triple_with_positions(self, subject_id, predicate_id, object_id, user_address):
        return await self._answer("get_triple_with_positions", subject_id, predicate_id, object_id, user_address)


def trusted_circle_response(*subjects: tuple[str | None, str | None]) -> dict[str, Any]:
    """Build a UserTrustedCircle response from (label, data) subject pairs."""
    return {
        "positions": [
            {"term": {"triple": {"subject_id": f"term-{i}", "subject": {"label": label, "data": data}}}}
            for i, (label, data) in enumerate(subjects)
        ]
    }


@pytest.fixture
def chain():
    return INTUITION_TESTNET


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStateStore()


@pytest.fixture
def cache(store, clock):
    return TrustedCircleCache(store, ttl_seconds=3600, clock=clock)


@pytest.fixture
def make_service(cache, chain):
    def _make(provider: FakeProvider) -> TrustedCircleService:
        return TrustedCircleService(provider, cache, chain)

    return _make
