"""Repository for User persistence."""

import sqlite3
from datetime import datetime
from typing import Any, Dict, Optional

from ...domain.models import User
from ...domain.models.user import default_preferences
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

# Columns writable through profile updates; credentials and the reset
# challenge are never among them.
PROFILE_COLUMNS = (
    "name",
    "profile_picture",
    "phone_number",
    "date_of_birth",
    "gender",
    "company",
    "job_title",
    "bio",
    "address",
    "social_links",
    "preferences",
)
_JSON_COLUMNS = {"address", "social_links", "preferences"}
_DATETIME_COLUMNS = {"date_of_birth"}


class SQLiteUserRepository:
    """Repository for managing User entities in SQLite."""

    def __init__(self, db_path: PathLike):
        self.db_path = db_path
        ensure_parent(db_path)
        self._initialize_table()

    def _initialize_table(self) -> None:
        with connect(self.db_path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    otp TEXT,
                    otp_expiry TEXT,
                    otp_used INTEGER NOT NULL DEFAULT 0,
                    profile_picture TEXT NOT NULL DEFAULT '',
                    phone_number TEXT,
                    date_of_birth TEXT,
                    gender TEXT,
                    company TEXT,
                    job_title TEXT,
                    bio TEXT,
                    address TEXT,
                    social_links TEXT,
                    preferences TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_users_email ON users(email)")

    def create(self, name: str, email: str, password_hash: str, profile: Dict[str, Any]) -> User:
        """Insert a new user.

        Raises:
            sqlite3.IntegrityError: If the email is already taken
        """
        values = {column: profile.get(column) for column in PROFILE_COLUMNS if column != "name"}
        values["profile_picture"] = values.get("profile_picture") or ""
        values["preferences"] = {**default_preferences(), **(values.get("preferences") or {})}
        values["address"] = values.get("address") or {}
        values["social_links"] = values.get("social_links") or {}
        now = to_db_datetime(utcnow())

        columns = ["name", "email", "password_hash", "otp_used", *values.keys(), "created_at", "updated_at"]
        params = [name, email, password_hash, 0]
        params.extend(self._to_db(column, value) for column, value in values.items())
        params.extend([now, now])

        placeholders = ", ".join("?" for _ in columns)
        with connect(self.db_path) as conn:
            cursor = conn.execute(
                f"INSERT INTO users ({', '.join(columns)}) VALUES ({placeholders})",
                params,
            )
            row = conn.execute("SELECT * FROM users WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return self._row_to_user(row)

    def get_by_id(self, user_id: int) -> Optional[User]:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with connect(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return self._row_to_user(row) if row else None

    def set_otp(self, user_id: int, otp: str, expires_at: datetime) -> None:
        """Replace whatever reset challenge the user had with a fresh one."""
        with connect(self.db_path) as conn:
            conn.execute(
                """
                UPDATE users
                SET otp = ?, otp_expiry = ?, otp_used = 0, updated_at = ?
                WHERE id = ?
                """,
                (otp, to_db_datetime(expires_at), to_db_datetime(utcnow()), user_id),
            )

    def consume_otp(self, user_id: int, otp: str, password_hash: str, now: datetime) -> bool:
        """Store a new password hash and burn ``otp`` in a single statement.

        Returns ``False`` when the code no longer matches an unused challenge
        that is still live at ``now``, so two concurrent resets with the same
        code cannot both succeed and a reset cannot land after expiry.
        """
        with connect(self.db_path) as conn:
            cursor = conn.execute(
                """
                UPDATE users
                SET password_hash = ?, otp_used = 1, updated_at = ?
                WHERE id = ? AND otp = ? AND otp_used = 0 AND otp_expiry >= ?
                """,
                (password_hash, to_db_datetime(utcnow()), user_id, otp, to_db_datetime(now)),
            )
            return cursor.rowcount == 1

    def update_profile(self, user_id: int, fields: Dict[str, Any]) -> Optional[User]:
        changes = {key: value for key, value in fields.items() if key in PROFILE_COLUMNS}
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            params = [self._to_db(column, value) for column, value in changes.items()]
            params.extend([to_db_datetime(utcnow()), user_id])
            with connect(self.db_path) as conn:
                conn.execute(
                    f"UPDATE users SET {assignments}, updated_at = ? WHERE id = ?",
                    params,
                )
        return self.get_by_id(user_id)

    @staticmethod
    def _to_db(column: str, value: Any) -> Any:
        if column in _JSON_COLUMNS:
            return to_db_json(value if value is not None else {})
        if column in _DATETIME_COLUMNS:
            return to_db_datetime(value)
        return value

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            otp=row["otp"],
            otp_expiry=from_db_datetime(row["otp_expiry"]),
            otp_used=bool(row["otp_used"]),
            profile_picture=row["profile_picture"] or "",
            phone_number=row["phone_number"],
            date_of_birth=from_db_datetime(row["date_of_birth"]),
            gender=row["gender"],
            company=row["company"],
            job_title=row["job_title"],
            bio=row["bio"],
            address=from_db_json(row["address"], {}),
            social_links=from_db_json(row["social_links"], {}),
            preferences=from_db_json(row["preferences"], default_preferences()),
            created_at=from_db_datetime(row["created_at"]),
            updated_at=from_db_datetime(row["updated_at"]),
        )
