from __future__ import annotations

import logging
import os
import sqlite3
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    subject: str = "subject"
    description: str = "description"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


COLS = _Cols()

_MEMORY = ":memory:"


# PUBLIC_INTERFACE
def open_database(db_path: str) -> sqlite3.Connection:
    """
    Open the SQLite handle shared by the service and make sure the schema exists.

    The connection may be used from FastAPI's threadpool; callers serialize
    access (see TODOService).
    """
    if db_path != _MEMORY:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    init_schema(conn)
    logger.info("Opened database at %s", db_path)
    return conn


# PUBLIC_INTERFACE
def init_schema(conn: sqlite3.Connection) -> None:
    """Create the todos table and its updated_at trigger if they are missing."""
    with conn:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {COLS.table} (
                {COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                {COLS.subject} TEXT NOT NULL CHECK({COLS.subject} <> ''),
                {COLS.description} TEXT NOT NULL DEFAULT '',
                {COLS.created_at} DATETIME NOT NULL DEFAULT (DATETIME('now')),
                {COLS.updated_at} DATETIME NOT NULL DEFAULT (DATETIME('now'))
            )
            """
        )
        conn.execute(
            f"""
            CREATE TRIGGER IF NOT EXISTS trigger_{COLS.table}_{COLS.updated_at}
            AFTER UPDATE ON {COLS.table}
            BEGIN
                UPDATE {COLS.table} SET {COLS.updated_at} = DATETIME('now')
                WHERE {COLS.id} = NEW.{COLS.id};
            END
            """
        )
