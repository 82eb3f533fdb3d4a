"""Key-value persistence boundary for the draft and the active step."""

from __future__ import annotations

import json
import sqlite3
import time
from pathlib import Path
from typing import Any, Protocol

DEFAULT_DB_PATH = Path.home() / ".career-draft" / "drafts.db"


class KeyValueStorage(Protocol):
    """Anything with JSON-value get/set semantics."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStorage:
    """In-process storage. Values are stored as JSON text so callers never share state."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SQLiteStorage:
    """SQLite-backed key-value store, one row per key."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH, namespace: str = "default"):
        self.db_path = Path(db_path)
        self.namespace = namespace
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value_json TEXT NOT NULL,
                    updated_at REAL NOT NULL,
                    PRIMARY KEY (namespace, key)
                )
            """)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def get(self, key: str, default: Any = None) -> Any:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value_json FROM kv_store WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            ).fetchone()
        if row is None:
            return default
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO kv_store
                   (namespace, key, value_json, updated_at)
                   VALUES (?, ?, ?, ?)""",
                (self.namespace, key, json.dumps(value), time.time()),
            )

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM kv_store WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            )

    def keys(self) -> list[str]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT key FROM kv_store WHERE namespace = ? ORDER BY key",
                (self.namespace,),
            ).fetchall()
        return [row[0] for row in rows]
