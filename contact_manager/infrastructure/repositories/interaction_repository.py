"""Repository for Interaction persistence."""

import sqlite3
from typing import Any, Dict, List, Optional

from ...domain.models import Interaction
from ..persistence.sqlite import (
    PathLike,
    connect,
    ensure_parent,
    from_db_datetime,
    to_db_datetime,
    utcnow,
)

INTERACTION_COLUMNS = ("type", "title", "location", "date", "notes", "reminder")
_DATETIME_COLUMNS = {"date", "reminder"}


class SQLiteInteractionRepository:
    """Stores interactions; rows disappear together with their contact."""

    def __init__(self, db_path: PathLike):
        self.db_path = db_path
        ensure_parent(db_path)
        self._initialize_table()

    def _initialize_table(self) -> None:
        with connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS interactions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    contact_id INTEGER NOT NULL,
                    type TEXT NOT NULL CHECK (type IN ('call', 'email', 'meeting')),
                    title TEXT NOT NULL,
                    location TEXT,
                    date TEXT NOT NULL,
                    notes TEXT,
                    reminder TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(contact_id) REFERENCES contacts(id) ON DELETE CASCADE
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_interactions_contact_date "
                "ON interactions(contact_id, date DESC)"
            )

    def create(self, contact_id: int, fields: Dict[str, Any]) -> Interaction:
        now = utcnow()
        values = {column: fields.get(column) for column in INTERACTION_COLUMNS}
        values["date"] = values["date"] or now
        columns = ["contact_id", *values.keys(), "created_at", "updated_at"]
        params: List[Any] = [contact_id]
        params.extend(self._to_db(column, value) for column, value in values.items())
        params.extend([to_db_datetime(now), to_db_datetime(now)])

        placeholders = ", ".join("?" for _ in columns)
        with connect(self.db_path) as conn:
            cursor = conn.execute(
                f"INSERT INTO interactions ({', '.join(columns)}) VALUES ({placeholders})",
                params,
            )
            row = conn.execute(
                "SELECT * FROM interactions WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
        return self._row_to_interaction(row)

    def list_all(self) -> List[Interaction]:
        with connect(self.db_path) as conn:
            rows = conn.execute("SELECT * FROM interactions ORDER BY date ASC, id ASC").fetchall()
        return [self._row_to_interaction(row) for row in rows]

    def list_for_contact(self, contact_id: int) -> List[Interaction]:
        with connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM interactions WHERE contact_id = ? ORDER BY date DESC, id DESC",
                (contact_id,),
            ).fetchall()
        return [self._row_to_interaction(row) for row in rows]

    def get(self, interaction_id: int) -> Optional[Interaction]:
        with connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT * FROM interactions WHERE id = ?", (interaction_id,)
            ).fetchone()
        return self._row_to_interaction(row) if row else None

    def update(self, interaction_id: int, fields: Dict[str, Any]) -> Optional[Interaction]:
        changes = {key: value for key, value in fields.items() if key in INTERACTION_COLUMNS}
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            params = [self._to_db(column, value) for column, value in changes.items()]
            params.extend([to_db_datetime(utcnow()), interaction_id])
            with connect(self.db_path) as conn:
                conn.execute(
                    f"UPDATE interactions SET {assignments}, updated_at = ? WHERE id = ?",
                    params,
                )
        return self.get(interaction_id)

    def delete(self, interaction_id: int) -> bool:
        with connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM interactions WHERE id = ?", (interaction_id,))
            return cursor.rowcount == 1

    @staticmethod
    def _to_db(column: str, value: Any) -> Any:
        if column in _DATETIME_COLUMNS:
            return to_db_datetime(value)
        return value

    @staticmethod
    def _row_to_interaction(row: sqlite3.Row) -> Interaction:
        return Interaction(
            id=row["id"],
            contact_id=row["contact_id"],
            type=row["type"],
            title=row["title"],
            location=row["location"],
            date=from_db_datetime(row["date"]),
            notes=row["notes"],
            reminder=from_db_datetime(row["reminder"]),
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )
