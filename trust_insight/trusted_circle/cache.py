"""
Time-boxed cache of each user's trusted circle.

Entries live in an injected StateStoreBackend under one namespace, keyed by
lowercased user address. A hit is honored only while now - timestamp < ttl;
expired entries are ignored (not deleted) and overwritten by the next set().
No locking: concurrent refreshes for the same address write the same
eventual state, last writer wins.
"""

from __future__ import annotations

import time
from typing import Callable

from trust_insight.config.env import DEFAULT_TRUSTED_CIRCLE_TTL_SECONDS
from trust_insight.core.exceptions import ConfigError
from trust_insight.database.state_store import StateStoreBackend
from trust_insight.insight_logging import get_logger, short_id
from trust_insight.trusted_circle.models import CachedTrustedCircle, TrustedContact

logger = get_logger(__name__)

CACHE_NAMESPACE = "trusted_circle"


class TrustedCircleCache:
    def __init__(
        self,
        store: StateStoreBackend,
        ttl_seconds: float = DEFAULT_TRUSTED_CIRCLE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ConfigError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._store = store
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock

    @staticmethod
    def _key(user_address: str) -> str:
        return user_address.strip().lower()

    def is_fresh(self, entry: CachedTrustedCircle) -> bool:
        age = self._clock() - entry.timestamp
        return 0 <= age < self.ttl_seconds

    def get(self, user_address: str) -> list[TrustedContact] | None:
        """Return cached contacts for user_address, or None on miss, malformed entry or expiry."""
        raw = self._store.get(CACHE_NAMESPACE, self._key(user_address))
        if raw is None:
            return None
        try:
            entry = CachedTrustedCircle.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("trusted_circle_cache_malformed", user_address=short_id(user_address), error=str(e))
            return None
        if not self.is_fresh(entry):
            logger.debug("trusted_circle_cache_expired", user_address=short_id(user_address))
            return None
        return entry.contacts

    def set(self, user_address: str, contacts: list[TrustedContact]) -> None:
        """Replace the entry for user_address with contacts stamped at the current time."""
        entry = CachedTrustedCircle(contacts=list(contacts), timestamp=self._clock())
        self._store.set(CACHE_NAMESPACE, self._key(user_address), entry.to_dict())

    def clear(self) -> int:
        """Drop every cached trusted circle."""
        return self._store.clear(CACHE_NAMESPACE)
