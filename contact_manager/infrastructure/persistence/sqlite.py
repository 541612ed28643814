"""Connection and value-conversion helpers shared by the SQLite repositories."""

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional, Union

PathLike = Union[str, Path]


@contextmanager
def connect(db_path: PathLike) -> Iterator[sqlite3.Connection]:
    """Open a connection with row access by name and foreign keys enforced.

    The block runs in a transaction that is committed on success and rolled
    back on error; the connection is always closed.
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        with conn:
            yield conn
    finally:
        conn.close()


def ensure_parent(db_path: PathLike) -> None:
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def to_db_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    # Fixed width so stored timestamps compare correctly as strings.
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_db_json(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


def from_db_json(value: Optional[str], default: Any) -> Any:
    if not value:
        return default
    return json.loads(value)
