"""Shared guard that keeps database failures out of API responses."""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from ...domain.errors import ServerError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Turn database failures into a ServerError without leaking details."""
    try:
        yield
    except sqlite3.Error as exc:
        logger.exception("Storage failure during %s", action)
        raise ServerError() from exc
