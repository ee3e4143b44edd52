"""Keyed stores with per-entry time-to-live used for analysis caching."""

from __future__ import annotations

import json
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

Clock = Callable[[], float]


class CacheStore(Protocol):
    """Minimal contract the analysis cache needs from a backing store."""

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        ...

    def put(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        ...


class InMemoryCacheStore:
    """Process-local store; expired entries are evicted on read and on write."""

    def __init__(self, *, clock: Clock = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[float, str]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, payload = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
        return json.loads(payload)

    def put(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        # Stored serialized so callers cannot mutate a cached value in place.
        payload = json.dumps(value)
        with self._lock:
            now = self._clock()
            self._prune(now)
            self._entries[key] = (now + ttl_seconds, payload)

    def _prune(self, now: float) -> None:
        expired = [
            key for key, (expires_at, _) in self._entries.items() if now >= expires_at
        ]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class SQLiteCacheStore:
    """SQLite-backed store that prunes expired rows on access."""

    def __init__(self, db_path: str, *, clock: Clock = time.time) -> None:
        self._db_path = Path(db_path)
        self._clock = clock
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS analysis_cache (
                    cache_key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    expires_at REAL NOT NULL
                )
                """
            )

    def _prune(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            "DELETE FROM analysis_cache WHERE expires_at <= ?",
            (self._clock(),),
        )

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            self._prune(conn)
            row = conn.execute(
                "SELECT payload FROM analysis_cache WHERE cache_key = ?",
                (key,),
            ).fetchone()
        if not row:
            return None
        return json.loads(row["payload"])

    def put(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        payload = json.dumps(value)
        expires_at = self._clock() + ttl_seconds
        with self._connect() as conn:
            self._prune(conn)
            conn.execute(
                """
                INSERT INTO analysis_cache (cache_key, payload, expires_at)
                VALUES (?, ?, ?)
                ON CONFLICT(cache_key) DO UPDATE SET
                    payload = excluded.payload,
                    expires_at = excluded.expires_at
                """,
                (key, payload, expires_at),
            )


__all__ = ["CacheStore", "InMemoryCacheStore", "SQLiteCacheStore"]
