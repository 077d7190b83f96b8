"""Storage for the dashboard's fit analysis records."""
from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import List

from postgrest.exceptions import APIError
from supabase import Client

from fitroom_app.errors import StoreError
from models.fit_analysis import FitAnalysisRecord

ANALYSIS_TABLE = "fit_analyses"


class FitAnalysisStore:
    """Interface for ``fit_analyses`` persistence, scoped by user."""

    def create_analysis(self, record: FitAnalysisRecord) -> FitAnalysisRecord:
        raise NotImplementedError

    def list_analyses(self, user_id: str) -> List[FitAnalysisRecord]:
        raise NotImplementedError


class SQLiteFitAnalysisStore(FitAnalysisStore):
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
                CREATE TABLE IF NOT EXISTS {ANALYSIS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    clothing_name TEXT NOT NULL,
                    clothing_url TEXT NOT NULL,
                    preferred_size TEXT NOT NULL,
                    fit_score INTEGER NOT NULL CHECK (fit_score BETWEEN 0 AND 100),
                    recommendation TEXT NOT NULL,
                    overlay_image TEXT,
                    created_at TEXT NOT NULL,
                    likes INTEGER NOT NULL DEFAULT 0,
                    comments INTEGER NOT NULL DEFAULT 0,
                    views INTEGER NOT NULL DEFAULT 0
                );
                """
            )

    def create_analysis(self, record: FitAnalysisRecord) -> FitAnalysisRecord:
        row = record.to_row()
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO {ANALYSIS_TABLE}({columns}) VALUES ({placeholders})",
                tuple(row.values()),
            )
        return record

    def list_analyses(self, user_id: str) -> List[FitAnalysisRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM {ANALYSIS_TABLE} WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            ).fetchall()
        return [FitAnalysisRecord.from_row(dict(row)) for row in rows]


class SupabaseFitAnalysisStore(FitAnalysisStore):
    def __init__(self, client: Client) -> None:
        self.client = client

    def create_analysis(self, record: FitAnalysisRecord) -> FitAnalysisRecord:
        try:
            result = self.client.table(ANALYSIS_TABLE).insert(record.to_row()).execute()
        except APIError as exc:
            raise StoreError(exc.message or str(exc)) from exc
        return FitAnalysisRecord.from_row(result.data[0]) if result.data else record

    def list_analyses(self, user_id: str) -> List[FitAnalysisRecord]:
        try:
            result = (
                self.client.table(ANALYSIS_TABLE)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except APIError as exc:
            raise StoreError(f"Failed to load your fit analyses: {exc.message or exc}") from exc
        return [FitAnalysisRecord.from_row(row) for row in result.data or []]


__all__ = [
    "ANALYSIS_TABLE",
    "FitAnalysisStore",
    "SQLiteFitAnalysisStore",
    "SupabaseFitAnalysisStore",
]
