"""
State persistence: namespaced key-value storage for cache entries.

MemoryStateStore for tests and single-process use; SQLiteStateStore for
persistence across restarts. Both implement StateStoreBackend.
"""

from trust_insight.database.state_store import (
    MemoryStateStore,
    SQLiteStateStore,
    StateStoreBackend,
)

__all__ = [
    "MemoryStateStore",
    "SQLiteStateStore",
    "StateStoreBackend",
]
