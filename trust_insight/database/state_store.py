"""
Namespaced key-value state for cache entries.

The engine only needs get / set / clear; values are JSON-serializable dicts.
MemoryStateStore backs tests and single-process use; SQLiteStateStore
persists across restarts. Both copy values on the way in and out so callers
never share mutable state with the store.
"""

from __future__ import annotations

import json
import sqlite3
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from trust_insight.insight_logging import get_logger

logger = get_logger(__name__)

SCHEMA_INSIGHT_STATE = """
CREATE TABLE IF NOT EXISTS insight_state (
    namespace TEXT NOT NULL,
    key TEXT NOT NULL,
    value_json TEXT NOT NULL,
    updated_at INTEGER NOT NULL,
    PRIMARY KEY (namespace, key)
);
"""


class StateStoreBackend(ABC):
    """Abstract interface for scoped state; implement for memory, SQLite or a wallet store."""

    @abstractmethod
    def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        """Return the stored value for (namespace, key), or None."""
        ...

    @abstractmethod
    def set(self, namespace: str, key: str, value: dict[str, Any]) -> None:
        """Store value under (namespace, key), replacing any prior value."""
        ...

    @abstractmethod
    def clear(self, namespace: str) -> int:
        """Remove every entry in namespace. Returns number removed."""
        ...


class MemoryStateStore(StateStoreBackend):
    """Process-local dict store."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, str]] = {}

    def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        raw = self._data.get(namespace, {}).get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, namespace: str, key: str, value: dict[str, Any]) -> None:
        self._data.setdefault(namespace, {})[key] = json.dumps(value)

    def clear(self, namespace: str) -> int:
        return len(self._data.pop(namespace, {}))


class SQLiteStateStore(StateStoreBackend):
    """SQLite implementation; single file, one connection per operation."""

    def __init__(self, path: str | Path, *, timeout_sec: float = 5.0) -> None:
        self._path = Path(path)
        self._timeout_sec = timeout_sec
        self.ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._path), timeout=self._timeout_sec)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        conn = self._connect()
        try:
            cur = conn.cursor()
            yield cur
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def ensure_schema(self) -> None:
        with self._cursor() as cur:
            cur.executescript(SCHEMA_INSIGHT_STATE)

    def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        with self._cursor() as cur:
            cur.execute(
                "SELECT value_json FROM insight_state WHERE namespace = ? AND key = ?",
                (namespace, key),
            )
            row = cur.fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value_json"])
        except json.JSONDecodeError:
            logger.warning("state_store_corrupt_entry", namespace=namespace, key=key)
            return None

    def set(self, namespace: str, key: str, value: dict[str, Any]) -> None:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO insight_state (namespace, key, value_json, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(namespace, key) DO UPDATE SET
                    value_json = excluded.value_json,
                    updated_at = excluded.updated_at
                """,
                (namespace, key, json.dumps(value), int(time.time())),
            )

    def clear(self, namespace: str) -> int:
        with self._cursor() as cur:
            cur.execute("DELETE FROM insight_state WHERE namespace = ?", (namespace,))
            return cur.rowcount
