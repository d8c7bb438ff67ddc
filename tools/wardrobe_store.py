"""Wardrobe inventory abstractions and SQLite implementation."""
from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import List, Optional

from models.wardrobe_item import WardrobeItem, from_raw_metadata
from tools.observability import instrument_tool


class WardrobeStore:
    """Read/write interface for a user's wardrobe inventory.

    The compatibility engine only consumes :meth:`list_items_for_user`.
    """

    def create_item(self, user_id: str, item: WardrobeItem) -> WardrobeItem:
        raise NotImplementedError

    def get_item(self, user_id: str, item_id: str) -> Optional[WardrobeItem]:
        raise NotImplementedError

    def list_items_for_user(self, user_id: str) -> List[WardrobeItem]:
        raise NotImplementedError

    def delete_item(self, user_id: str, item_id: str) -> bool:
        raise NotImplementedError


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store for wardrobe items."""

    def __init__(self, database_path: str | Path = "data/scanner.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS wardrobe_items (
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    name TEXT,
                    brand TEXT,
                    category TEXT,
                    colors TEXT,
                    seasons TEXT,
                    occasions TEXT,
                    status TEXT NOT NULL DEFAULT 'pending',
                    created_seq INTEGER,
                    PRIMARY KEY (user_id, item_id)
                );
                """
            )

    @staticmethod
    def _serialise_list(values: Optional[List[object]]) -> str:
        return json.dumps(values or [])

    @staticmethod
    def _deserialise_list(raw: str) -> List[object]:
        return json.loads(raw) if raw else []

    @instrument_tool("create_wardrobe_item")
    def create_item(self, user_id: str, item: WardrobeItem) -> WardrobeItem:
        with self._connect() as conn:
            existing = conn.execute(
                "SELECT created_seq FROM wardrobe_items WHERE user_id = ? AND item_id = ?",
                (user_id, item.id),
            ).fetchone()
            if existing:
                created_seq = existing["created_seq"]
            else:
                created_seq = conn.execute(
                    "SELECT COALESCE(MAX(created_seq), 0) + 1 FROM wardrobe_items WHERE user_id = ?",
                    (user_id,),
                ).fetchone()[0]
            conn.execute(
                """
                INSERT OR REPLACE INTO wardrobe_items (
                    user_id, item_id, name, brand, category, colors, seasons, occasions, status, created_seq
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    item.id,
                    item.name,
                    item.brand,
                    item.category,
                    self._serialise_list(item.colors),
                    self._serialise_list(item.seasons),
                    self._serialise_list(item.occasions),
                    item.status,
                    created_seq,
                ),
            )
        return item

    def _row_to_item(self, row: sqlite3.Row) -> WardrobeItem:
        metadata = dict(row)
        for column in ("colors", "seasons", "occasions"):
            metadata[column] = self._deserialise_list(metadata[column])
        return from_raw_metadata(metadata)

    def get_item(self, user_id: str, item_id: str) -> Optional[WardrobeItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM wardrobe_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            row = cursor.fetchone()
            return self._row_to_item(row) if row else None

    @instrument_tool("list_wardrobe_items")
    def list_items_for_user(self, user_id: str) -> List[WardrobeItem]:
        """Return every item for the user in insertion order, whatever its status."""

        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM wardrobe_items WHERE user_id = ? ORDER BY created_seq",
                (user_id,),
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def delete_item(self, user_id: str, item_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM wardrobe_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            return cursor.rowcount > 0


__all__ = ["WardrobeStore", "SQLiteWardrobeStore"]
