from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from functools import lru_cache
from threading import RLock
from typing import Generator, List, Optional, Sequence

from .db import COLS, open_database
from .errors import ConstraintViolation, NotFoundError, StoreError, ValidationError
from .models import TodoEntity
from .settings import get_settings

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = (
    f"{COLS.id}, {COLS.subject}, {COLS.description}, {COLS.created_at}, {COLS.updated_at}"
)


def _parse_dt(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


# PUBLIC_INTERFACE
class TODOService:
    """
    CRUD of TODO rows against an injected SQLite connection.

    Every operation holds the service lock, and writes run their statement and
    the read-back of the written row inside one transaction.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = RLock()

    @contextmanager
    def _store_errors(self, op: str) -> Generator[None, None, None]:
        try:
            yield
        except sqlite3.IntegrityError as exc:
            raise ConstraintViolation(f"{op}: {exc}") from exc
        except OverflowError as exc:
            # Integer parameter wider than the store's 64-bit INTEGER.
            raise ValidationError(f"{op}: {exc}") from exc
        except sqlite3.Error as exc:
            logger.exception("Store failure during %s", op)
            raise StoreError(f"{op}: {exc}") from exc

    def _row_to_entity(self, row: Sequence) -> TodoEntity:
        return {
            "id": int(row[0]),
            "subject": str(row[1]),
            "description": row[2] if row[2] is not None else "",
            "created_at": _parse_dt(row[3]),
            "updated_at": _parse_dt(row[4]),
        }

    def _fetch_one(self, todo_id: int) -> Optional[TodoEntity]:
        row = self._conn.execute(
            f"SELECT {_SELECT_COLUMNS} FROM {COLS.table} WHERE {COLS.id} = ?", (todo_id,)
        ).fetchone()
        return self._row_to_entity(row) if row is not None else None

    def create_todo(self, subject: str, description: Optional[str] = "") -> TodoEntity:
        """Insert a TODO and return it with its store-assigned id and timestamps."""
        if not subject:
            raise ConstraintViolation("subject must not be empty")
        with self._lock, self._store_errors("create"), self._conn:
            cur = self._conn.execute(
                f"INSERT INTO {COLS.table} ({COLS.subject}, {COLS.description}) VALUES (?, ?)",
                (subject, description or ""),
            )
            todo = self._fetch_one(cur.lastrowid)
        if todo is None:
            raise StoreError(f"create: inserted row {cur.lastrowid} could not be read back")
        logger.debug("Created todo %s", todo["id"])
        return todo

    def read_todos(self, prev_id: int = 0, size: int = 5) -> List[TodoEntity]:
        """
        Return up to ``size`` TODOs, newest first.

        Keyset pagination: with prev_id == 0 the newest rows are returned,
        otherwise only rows whose id is strictly below prev_id. No statement is
        issued when size is 0 or negative; unlike a raw negative LIMIT, which
        SQLite reads as "no limit", a negative size yields an empty page.
        """
        if size <= 0:
            return []
        if prev_id:
            sql = (
                f"SELECT {_SELECT_COLUMNS} FROM {COLS.table} "
                f"WHERE {COLS.id} < ? ORDER BY {COLS.id} DESC LIMIT ?"
            )
            params: tuple = (prev_id, size)
        else:
            sql = f"SELECT {_SELECT_COLUMNS} FROM {COLS.table} ORDER BY {COLS.id} DESC LIMIT ?"
            params = (size,)
        with self._lock, self._store_errors("read"):
            rows = self._conn.execute(sql, params).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def update_todo(self, todo_id: int, subject: str, description: Optional[str] = "") -> TodoEntity:
        """Replace subject and description of an existing TODO and return the stored row."""
        if not subject:
            raise ConstraintViolation("subject must not be empty")
        with self._lock, self._store_errors("update"), self._conn:
            cur = self._conn.execute(
                f"UPDATE {COLS.table} SET {COLS.subject} = ?, {COLS.description} = ? "
                f"WHERE {COLS.id} = ?",
                (subject, description or "", todo_id),
            )
            if cur.rowcount == 0:
                raise NotFoundError("Updated row not found")
            todo = self._fetch_one(todo_id)
        if todo is None:
            raise NotFoundError("Updated row not found")
        return todo

    def delete_todos(self, ids: Sequence[int]) -> None:
        """
        Delete every TODO whose id is in ``ids`` with a single statement.

        Empty ``ids`` is a no-op. Raises NotFoundError when nothing matched;
        a partial match is a success.
        """
        if not ids:
            return
        placeholders = ", ".join("?" for _ in ids)
        with self._lock, self._store_errors("delete"), self._conn:
            cur = self._conn.execute(
                f"DELETE FROM {COLS.table} WHERE {COLS.id} IN ({placeholders})",
                tuple(ids),
            )
            if cur.rowcount == 0:
                raise NotFoundError("Deleted row not found")
        logger.debug("Deleted %d todo(s)", cur.rowcount)


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_todo_service() -> TODOService:
    """
    FastAPI dependency returning the process-wide TODOService bound to the
    database configured by SQLITE_DB_PATH.
    """
    settings = get_settings()
    return TODOService(open_database(settings.sqlite_db_path))
