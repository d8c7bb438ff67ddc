"""Persistence for shopping scans and their compatibility results."""
from __future__ import annotations

import json
import sqlite3
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.compatibility import Insight
from models.scan import ShoppingScan
from tools.observability import instrument_tool

_LIST_COLUMNS = ("secondary_colors", "season", "matching_item_ids")
_COLUMNS = (
    "id",
    "user_id",
    "scan_method",
    "product_name",
    "product_brand",
    "product_url",
    "product_image_url",
    "category",
    "color",
    "secondary_colors",
    "style",
    "material",
    "pattern",
    "season",
    "formality",
    "price_amount",
    "price_currency",
    "compatibility_score",
    "matching_item_ids",
    "ai_insights",
    "user_rating",
    "is_wishlisted",
    "created_at",
    "updated_at",
)


class ScanStore:
    """Persistence interface for shopping scans, always scoped by user."""

    def save_scan(self, scan: ShoppingScan) -> ShoppingScan:
        raise NotImplementedError

    def get_scan(self, user_id: str, scan_id: str) -> Optional[ShoppingScan]:
        raise NotImplementedError

    def list_scans(self, user_id: str, limit: int = 20) -> List[ShoppingScan]:
        raise NotImplementedError

    def list_wishlist(self, user_id: str) -> List[ShoppingScan]:
        raise NotImplementedError

    def update_scan(self, scan: ShoppingScan) -> ShoppingScan:
        raise NotImplementedError

    def set_wishlisted(self, user_id: str, scan_id: str, is_wishlisted: bool) -> Optional[ShoppingScan]:
        raise NotImplementedError

    def set_rating(self, user_id: str, scan_id: str, rating: int) -> Optional[ShoppingScan]:
        raise NotImplementedError

    def delete_scan(self, user_id: str, scan_id: str) -> bool:
        raise NotImplementedError


class SQLiteScanStore(ScanStore):
    """Local SQLite-backed store for shopping scans."""

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
                CREATE TABLE IF NOT EXISTS shopping_scans (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    scan_method TEXT NOT NULL CHECK (scan_method IN ('screenshot', 'url')),
                    product_name TEXT,
                    product_brand TEXT,
                    product_url TEXT,
                    product_image_url TEXT,
                    category TEXT,
                    color TEXT,
                    secondary_colors TEXT,
                    style TEXT,
                    material TEXT,
                    pattern TEXT,
                    season TEXT,
                    formality INTEGER CHECK (formality IS NULL OR (formality >= 1 AND formality <= 10)),
                    price_amount REAL,
                    price_currency TEXT DEFAULT 'GBP',
                    compatibility_score INTEGER CHECK (
                        compatibility_score IS NULL OR (compatibility_score >= 0 AND compatibility_score <= 100)
                    ),
                    matching_item_ids TEXT,
                    ai_insights TEXT,
                    user_rating INTEGER CHECK (user_rating IS NULL OR (user_rating >= 1 AND user_rating <= 5)),
                    is_wishlisted INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT,
                    updated_at TEXT
                );
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS shopping_scans_created_at_idx ON shopping_scans(user_id, created_at DESC)"
            )

    @staticmethod
    def _scan_to_row(scan: ShoppingScan) -> Dict[str, Any]:
        row = scan.to_dict()
        for column in _LIST_COLUMNS:
            row[column] = json.dumps(row[column] or [])
        row["ai_insights"] = json.dumps(row["ai_insights"]) if row["ai_insights"] is not None else None
        row["is_wishlisted"] = int(bool(row["is_wishlisted"]))
        return row

    @staticmethod
    def _row_to_scan(row: sqlite3.Row) -> ShoppingScan:
        data = dict(row)
        for column in _LIST_COLUMNS:
            data[column] = json.loads(data[column]) if data[column] else []
        insights = json.loads(data["ai_insights"]) if data["ai_insights"] else None
        data["ai_insights"] = [Insight(**insight) for insight in insights] if insights is not None else None
        data["is_wishlisted"] = bool(data["is_wishlisted"])
        return ShoppingScan(**data)

    def _write(self, conn: sqlite3.Connection, scan: ShoppingScan) -> None:
        row = self._scan_to_row(scan)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        conn.execute(
            f"INSERT OR REPLACE INTO shopping_scans ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
            tuple(row[column] for column in _COLUMNS),
        )

    @instrument_tool("save_scan")
    def save_scan(self, scan: ShoppingScan) -> ShoppingScan:
        with self._connect() as conn:
            self._write(conn, scan)
        return scan

    def get_scan(self, user_id: str, scan_id: str) -> Optional[ShoppingScan]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM shopping_scans WHERE user_id = ? AND id = ?",
                (user_id, scan_id),
            ).fetchone()
            return self._row_to_scan(row) if row else None

    @instrument_tool("list_scans")
    def list_scans(self, user_id: str, limit: int = 20) -> List[ShoppingScan]:
        """Return the user's most recent scans, newest first."""

        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM shopping_scans WHERE user_id = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (user_id, limit),
            )
            return [self._row_to_scan(row) for row in cursor.fetchall()]

    def list_wishlist(self, user_id: str) -> List[ShoppingScan]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM shopping_scans WHERE user_id = ? AND is_wishlisted = 1 "
                "ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            )
            return [self._row_to_scan(row) for row in cursor.fetchall()]

    @instrument_tool("update_scan")
    def update_scan(self, scan: ShoppingScan) -> ShoppingScan:
        """Overwrite an existing scan; raises ``LookupError`` if it was never saved."""

        with self._connect() as conn:
            exists = conn.execute(
                "SELECT 1 FROM shopping_scans WHERE user_id = ? AND id = ?",
                (scan.user_id, scan.id),
            ).fetchone()
            if not exists:
                raise LookupError(f"Scan {scan.id} not found")
            self._write(conn, scan)
        return scan

    def set_wishlisted(self, user_id: str, scan_id: str, is_wishlisted: bool) -> Optional[ShoppingScan]:
        current = self.get_scan(user_id, scan_id)
        if not current:
            return None
        return self.update_scan(replace(current, is_wishlisted=is_wishlisted))

    def set_rating(self, user_id: str, scan_id: str, rating: int) -> Optional[ShoppingScan]:
        if not 1 <= rating <= 5:
            raise ValueError("rating must be between 1 and 5")
        current = self.get_scan(user_id, scan_id)
        if not current:
            return None
        return self.update_scan(replace(current, user_rating=rating))

    def delete_scan(self, user_id: str, scan_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM shopping_scans WHERE user_id = ? AND id = ?",
                (user_id, scan_id),
            )
            return cursor.rowcount > 0


__all__ = ["ScanStore", "SQLiteScanStore"]
