"""Shared SQLite connection handling for the local store."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

_BUSY_TIMEOUT_SECONDS = 10.0


@contextmanager
def connect(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(db_path, timeout=_BUSY_TIMEOUT_SECONDS)
    try:
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


def prepare(db_path: Path) -> None:
    """Make sure the database file can be created and uses WAL journaling."""

    db_path.parent.mkdir(parents=True, exist_ok=True)
    with connect(db_path) as conn:
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS _schema_meta (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
            """
        )
        conn.commit()


def get_schema_version(conn: sqlite3.Connection, key: str) -> int | None:
    row = conn.execute("SELECT value FROM _schema_meta WHERE key = ?", (key,)).fetchone()
    if row is None:
        return None
    return int(row[0])


def set_schema_version(conn: sqlite3.Connection, key: str, version: int) -> None:
    conn.execute(
        "INSERT OR REPLACE INTO _schema_meta(key, value) VALUES(?, ?)",
        (key, str(version)),
    )
