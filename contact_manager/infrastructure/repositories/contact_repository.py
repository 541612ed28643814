"""Repository for Contact persistence."""

import sqlite3
from typing import Any, Dict, List, Optional

from ...domain.models import Contact
from ..persistence.sqlite import (
    PathLike,
    connect,
    ensure_parent,
    from_db_datetime,
    from_db_json,
    to_db_datetime,
    to_db_json,
    utcnow,
)

CONTACT_COLUMNS = (
    "name",
    "company",
    "job_title",
    "emails",
    "phones",
    "address",
    "notes",
    "social_links",
    "birthday",
    "anniversary",
    "category",
)
_JSON_COLUMNS = {"emails", "phones", "notes", "social_links"}
_DATETIME_COLUMNS = {"birthday", "anniversary"}


class SQLiteContactRepository:
    """Stores contacts; every lookup is filtered by the owning user."""

    def __init__(self, db_path: PathLike):
        self.db_path = db_path
        ensure_parent(db_path)
        self._initialize_table()

    def _initialize_table(self) -> None:
        with connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS contacts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    company TEXT,
                    job_title TEXT,
                    emails TEXT NOT NULL DEFAULT '[]',
                    phones TEXT NOT NULL DEFAULT '[]',
                    address TEXT,
                    notes TEXT NOT NULL DEFAULT '[]',
                    social_links TEXT NOT NULL DEFAULT '[]',
                    birthday TEXT,
                    anniversary TEXT,
                    category TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_contacts_user_created "
                "ON contacts(user_id, created_at DESC)"
            )

    def create(self, user_id: int, fields: Dict[str, Any]) -> Contact:
        now = to_db_datetime(utcnow())
        columns = ["user_id", *CONTACT_COLUMNS, "created_at", "updated_at"]
        params: List[Any] = [user_id]
        params.extend(self._to_db(column, fields.get(column)) for column in CONTACT_COLUMNS)
        params.extend([now, now])

        placeholders = ", ".join("?" for _ in columns)
        with connect(self.db_path) as conn:
            cursor = conn.execute(
                f"INSERT INTO contacts ({', '.join(columns)}) VALUES ({placeholders})",
                params,
            )
            row = conn.execute(
                "SELECT * FROM contacts WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
        return self._row_to_contact(row)

    def list_for_user(self, user_id: int) -> List[Contact]:
        with connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM contacts WHERE user_id = ? ORDER BY created_at DESC, id DESC",
                (user_id,),
            ).fetchall()
        return [self._row_to_contact(row) for row in rows]

    def get_for_user(self, contact_id: int, user_id: int) -> Optional[Contact]:
        with connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT * FROM contacts WHERE id = ? AND user_id = ?",
                (contact_id, user_id),
            ).fetchone()
        return self._row_to_contact(row) if row else None

    def update_for_user(
        self, contact_id: int, user_id: int, fields: Dict[str, Any]
    ) -> Optional[Contact]:
        changes = {key: value for key, value in fields.items() if key in CONTACT_COLUMNS}
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            params = [self._to_db(column, value) for column, value in changes.items()]
            params.extend([to_db_datetime(utcnow()), contact_id, user_id])
            with connect(self.db_path) as conn:
                conn.execute(
                    f"UPDATE contacts SET {assignments}, updated_at = ? "
                    "WHERE id = ? AND user_id = ?",
                    params,
                )
        return self.get_for_user(contact_id, user_id)

    def delete_for_user(self, contact_id: int, user_id: int) -> bool:
        with connect(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM contacts WHERE id = ? AND user_id = ?", (contact_id, user_id)
            )
            return cursor.rowcount == 1

    @staticmethod
    def _to_db(column: str, value: Any) -> Any:
        if column in _JSON_COLUMNS:
            return to_db_json(value or [])
        if column in _DATETIME_COLUMNS:
            return to_db_datetime(value)
        return value

    @staticmethod
    def _row_to_contact(row: sqlite3.Row) -> Contact:
        return Contact(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            company=row["company"],
            job_title=row["job_title"],
            emails=from_db_json(row["emails"], []),
            phones=from_db_json(row["phones"], []),
            address=row["address"],
            notes=from_db_json(row["notes"], []),
            social_links=from_db_json(row["social_links"], []),
            birthday=from_db_datetime(row["birthday"]),
            anniversary=from_db_datetime(row["anniversary"]),
            category=row["category"],
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )
