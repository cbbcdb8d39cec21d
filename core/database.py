# core/database.py

from __future__ import annotations

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from core.config import VisionConfig


logger = logging.getLogger(__name__)


class IKeyValueStore(ABC):
    """
    Durable string store with read / replace semantics.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def replace(self, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError


class Database(IKeyValueStore):
    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or VisionConfig().db_path

        # timer and analyzer threads both end up writing here
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()

        self._create_tables()

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    def _create_tables(self):
        cur = self.conn.cursor()

        cur.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)

        self.conn.commit()

    # ------------------------------------------------------------------ #
    # IKeyValueStore
    # ------------------------------------------------------------------ #

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            cur = self.conn.cursor()
            cur.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cur.fetchone()
        if row is None:
            return None
        return row["value"]

    def replace(self, key: str, value: str) -> None:
        with self._lock:
            cur = self.conn.cursor()
            cur.execute(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
            self.conn.commit()

    def delete(self, key: str) -> None:
        with self._lock:
            cur = self.conn.cursor()
            cur.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            self.conn.commit()


class InMemoryKeyValueStore(IKeyValueStore):
    """Process-local store for tests and camera-less demos."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def replace(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
