"""SQLite-backed storage of the OAuth accounts linked to local users.

Tokens are written by whatever performs the Google sign-in. The sync only
reads them; nothing here refreshes or validates a token.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import structlog

from inbox_sync.store import sqlite

logger = structlog.get_logger()

DEFAULT_PROVIDER = "google"


class CredentialProvider(Protocol):
    """Looks up the access token stored for a user."""

    def get_access_token(self, user_id: str) -> str | None:
        ...


class AccountRepository:
    """Linked OAuth accounts, one row per (user, provider)."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path

    def initialize(self) -> None:
        sqlite.prepare(self._db_path)
        with sqlite.connect(self._db_path) as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS auth_accounts (
                    rowid INTEGER PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    provider TEXT NOT NULL,
                    access_token TEXT,
                    updated_at_iso TEXT NOT NULL,
                    UNIQUE(user_id, provider)
                );

                CREATE INDEX IF NOT EXISTS idx_auth_accounts_user
                    ON auth_accounts(user_id);
                """
            )
            conn.commit()

    def save_access_token(self, user_id: str, token: str, provider: str = DEFAULT_PROVIDER) -> None:
        """Store or replace the access token of a linked account."""

        with sqlite.connect(self._db_path) as conn:
            conn.execute(
                """
                INSERT INTO auth_accounts (user_id, provider, access_token, updated_at_iso)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id, provider) DO UPDATE SET
                    access_token=excluded.access_token,
                    updated_at_iso=excluded.updated_at_iso
                """,
                (user_id, provider, token, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()
        logger.info("access_token_saved", user_id=user_id, provider=provider)

    def get_access_token(self, user_id: str) -> str | None:
        """Return the token of the user's first linked account, if it has one."""

        with sqlite.connect(self._db_path) as conn:
            row = conn.execute(
                """
                SELECT access_token
                FROM auth_accounts
                WHERE user_id = ?
                ORDER BY rowid
                LIMIT 1
                """,
                (user_id,),
            ).fetchone()

        if row is None:
            return None
        token = row["access_token"]
        if not isinstance(token, str) or not token:
            return None
        return token

    def delete_account(self, user_id: str, provider: str = DEFAULT_PROVIDER) -> bool:
        with sqlite.connect(self._db_path) as conn:
            cur = conn.execute(
                "DELETE FROM auth_accounts WHERE user_id = ? AND provider = ?",
                (user_id, provider),
            )
            conn.commit()
        return cur.rowcount > 0
