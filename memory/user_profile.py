"""User profile storage (one row per user holding the stored photo)."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from postgrest.exceptions import APIError
from supabase import Client

from fitroom_app.errors import StoreError
from models.fit_analysis import UserProfile
from models.wardrobe_item import utc_now_iso

PROFILE_TABLE = "user_profiles"


class ProfileStore:
    """Interface for user profile persistence."""

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def upsert_photo(self, user_id: str, photo_url: Optional[str]) -> UserProfile:
        raise NotImplementedError


class SQLiteProfileStore(ProfileStore):
    def __init__(self, db_path: str | Path = "data/fitroom.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {PROFILE_TABLE} (
                    user_id TEXT PRIMARY KEY,
                    photo_url TEXT,
                    updated_at TEXT NOT NULL
                );
                """
            )

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT * FROM {PROFILE_TABLE} WHERE user_id = ?", (user_id,)
            ).fetchone()
        return UserProfile.from_row(dict(row)) if row else None

    def upsert_photo(self, user_id: str, photo_url: Optional[str]) -> UserProfile:
        profile = UserProfile(user_id=user_id, photo_url=photo_url, updated_at=utc_now_iso())
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO {PROFILE_TABLE}(user_id, photo_url, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    photo_url = excluded.photo_url,
                    updated_at = excluded.updated_at
                """,
                (profile.user_id, profile.photo_url, profile.updated_at),
            )
        return profile


class SupabaseProfileStore(ProfileStore):
    def __init__(self, client: Client) -> None:
        self.client = client

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        try:
            result = (
                self.client.table(PROFILE_TABLE)
                .select("*")
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except APIError as exc:
            raise StoreError(exc.message or str(exc)) from exc
        return UserProfile.from_row(result.data[0]) if result.data else None

    def upsert_photo(self, user_id: str, photo_url: Optional[str]) -> UserProfile:
        profile = UserProfile(user_id=user_id, photo_url=photo_url, updated_at=utc_now_iso())
        try:
            result = (
                self.client.table(PROFILE_TABLE)
                .upsert(profile.to_row(), on_conflict="user_id")
                .execute()
            )
        except APIError as exc:
            raise StoreError(exc.message or str(exc)) from exc
        return UserProfile.from_row(result.data[0]) if result.data else profile


__all__ = ["PROFILE_TABLE", "ProfileStore", "SQLiteProfileStore", "SupabaseProfileStore"]
