"""Wardrobe storage abstractions with SQLite and Supabase implementations."""
from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, List

from postgrest.exceptions import APIError
from supabase import Client

from fitroom_app.errors import StoreError
from models.wardrobe_item import WardrobeItem

WARDROBE_TABLE = "user_wardrobe"


class WardrobeStore:
    """Persistence interface for wardrobe items.

    Every read and write is filtered by the owning ``user_id``.
    """

    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        raise NotImplementedError

    def list_items_for_user(self, user_id: str) -> List[WardrobeItem]:
        """Return the user's items, newest first."""
        raise NotImplementedError

    def delete_item(self, user_id: str, item_id: str) -> bool:
        raise NotImplementedError


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store for wardrobe items."""

    def __init__(self, database_path: str | Path = "data/fitroom.db") -> None:
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
                f"""
                CREATE TABLE IF NOT EXISTS {WARDROBE_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    category TEXT,
                    color TEXT,
                    size TEXT,
                    photo_url TEXT,
                    ai_analysis TEXT,
                    created_at TEXT NOT NULL
                );
                """
            )

    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO {WARDROBE_TABLE} (
                    id, user_id, name, category, color, size, photo_url, ai_analysis, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.id,
                    item.user_id,
                    item.name,
                    item.category,
                    item.color,
                    item.size,
                    item.photo_url,
                    json.dumps(item.ai_analysis) if item.ai_analysis is not None else None,
                    item.created_at,
                ),
            )
        return item

    def _row_to_item(self, row: sqlite3.Row) -> WardrobeItem:
        data: Dict[str, Any] = dict(row)
        data["ai_analysis"] = json.loads(data["ai_analysis"]) if data.get("ai_analysis") else None
        return WardrobeItem.from_row(data)

    def list_items_for_user(self, user_id: str) -> List[WardrobeItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                f"SELECT * FROM {WARDROBE_TABLE} WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def delete_item(self, user_id: str, item_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                f"DELETE FROM {WARDROBE_TABLE} WHERE user_id = ? AND id = ?",
                (user_id, item_id),
            )
            return cursor.rowcount > 0


class SupabaseWardrobeStore(WardrobeStore):
    """Store backed by the hosted ``user_wardrobe`` table."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        try:
            result = self.client.table(WARDROBE_TABLE).insert(item.to_row()).execute()
        except APIError as exc:
            raise StoreError(exc.message or str(exc)) from exc
        return WardrobeItem.from_row(result.data[0]) if result.data else item

    def list_items_for_user(self, user_id: str) -> List[WardrobeItem]:
        try:
            result = (
                self.client.table(WARDROBE_TABLE)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except APIError as exc:
            raise StoreError(f"Failed to get items: {exc.message or exc}") from exc
        return [WardrobeItem.from_row(row) for row in result.data or []]

    def delete_item(self, user_id: str, item_id: str) -> bool:
        try:
            result = (
                self.client.table(WARDROBE_TABLE)
                .delete()
                .eq("id", item_id)
                .eq("user_id", user_id)
                .execute()
            )
        except APIError as exc:
            raise StoreError(f"Failed to delete item: {exc.message or exc}") from exc
        return bool(result.data)


__all__ = ["SQLiteWardrobeStore", "SupabaseWardrobeStore", "WARDROBE_TABLE", "WardrobeStore"]
