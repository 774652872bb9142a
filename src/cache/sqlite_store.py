# src/cache/sqlite_store.py — v2
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency. Suitable for a single host
running several worker processes that share one cache file.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from storykeeper.cache.base_cache_store import BaseCacheStore
from storykeeper.core.clock import Clock, SystemClock
from storykeeper.core.errors import CacheUnavailableError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    expires_at REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_expires_at ON cache_entries(expires_at);
"""


def _escape_like(prefix: str) -> str:
    return prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store with per-row expiry."""

    def __init__(self, db_path: Path | str, clock: Clock | None = None) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._clock = clock or SystemClock()
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    def get(self, key: str) -> tuple[Any, bool]:
        now = self._clock.now().timestamp()
        try:
            row = self._conn.execute(
                "SELECT data, expires_at FROM cache_entries WHERE key = ?", (key,)
            ).fetchone()
            if row is None:
                return None, False
            if row[1] <= now:
                self._conn.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
                self._conn.commit()
                return None, False
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"sqlite cache read failed: {e}") from e

        try:
            return json.loads(row[0]), True
        except json.JSONDecodeError as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None, False

    def set(self, key: str, value: Any, ttl: int) -> None:
        expires_at = self._clock.now().timestamp() + ttl
        try:
            self._conn.execute(
                """INSERT OR REPLACE INTO cache_entries (key, data, expires_at)
                   VALUES (?, ?, ?)""",
                (key, json.dumps(value, default=str), expires_at),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"sqlite cache write failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._conn.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
            self._conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"sqlite cache delete failed: {e}") from e

    def delete_by_prefix(self, prefix: str) -> int:
        try:
            cursor = self._conn.execute(
                "DELETE FROM cache_entries WHERE key LIKE ? ESCAPE '\\'",
                (_escape_like(prefix) + "%",),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"sqlite cache delete failed: {e}") from e
        return cursor.rowcount

    def purge_expired(self) -> int:
        """Drop expired rows. Returns number removed."""
        cursor = self._conn.execute(
            "DELETE FROM cache_entries WHERE expires_at <= ?",
            (self._clock.now().timestamp(),),
        )
        self._conn.commit()
        return cursor.rowcount

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
