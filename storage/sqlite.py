"""SQLite helpers for the persistence layer."""
from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from config.settings import settings
from services.errors import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def get_conn(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Yield a SQLite connection, ensuring the data directory exists.

    Driver errors surface as :class:`StorageError`.
    """

    path = db_path or settings.DB_PATH
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    try:
        conn = sqlite3.connect(path)
    except sqlite3.Error as exc:
        logger.exception("Unable to open database %s", path)
        raise StorageError() from exc
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as exc:
        logger.exception("SQLite operation failed on %s", path)
        raise StorageError() from exc
    finally:
        conn.close()


def to_db_time(value: datetime) -> str:
    """Serialize a datetime as fixed-width UTC ISO-8601 so text ordering matches time ordering."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_time(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed
