"""SQLite-backed store for synced message summaries.

Records are append-only and keyed by (owner, provider_message_id). Inserts
skip anything the owner already has, so re-running a sync over the same
messages never produces duplicates.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

import structlog

from inbox_sync.exceptions import ConfigurationError
from inbox_sync.gmail.parsing import sent_at_sort_key
from inbox_sync.models import MessageSummary
from inbox_sync.store import sqlite

logger = structlog.get_logger()


_SCHEMA_KEY = "message_summaries_schema_version"
_SCHEMA_VERSION = 1

# Unparseable dates sort below every real one.
_OLDEST = -(2**63)


class MessageSummaryRepository:
    """Repository for storing and reading message summaries per owner."""

    def __init__(self, db_path: Path) -> None:
        """Create a repository.

        Args:
            db_path: Path to the SQLite database file.
        """

        self._db_path = db_path

    @property
    def db_path(self) -> Path:
        return self._db_path

    def initialize(self) -> None:
        """Create or verify the summary schema."""

        sqlite.prepare(self._db_path)

        with self._connect() as conn:
            current_version = sqlite.get_schema_version(conn, _SCHEMA_KEY)
            if current_version is None:
                self._create_schema_v1(conn)
                sqlite.set_schema_version(conn, _SCHEMA_KEY, _SCHEMA_VERSION)
                conn.commit()
                logger.info("message_summary_schema_created", version=_SCHEMA_VERSION)
                return

            if current_version != _SCHEMA_VERSION:
                raise ConfigurationError(
                    f"Unsupported schema version {current_version}; expected {_SCHEMA_VERSION}"
                )

    def bulk_insert_if_absent(self, owner: str, records: Sequence[MessageSummary]) -> int:
        """Insert the records `owner` does not have yet.

        The owner's existing ids are read once, then applied to the whole
        batch. Duplicates, within the batch or against the store, are skipped
        silently. Every row is stored under `owner`.

        Returns:
            Number of rows actually inserted.
        """

        if not records:
            return 0

        with self._connect() as conn:
            existing = {
                row[0]
                for row in conn.execute(
                    "SELECT provider_message_id FROM message_summaries WHERE owner = ?",
                    (owner,),
                )
            }

            fresh: list[MessageSummary] = []
            for record in records:
                if record.provider_message_id in existing:
                    continue
                existing.add(record.provider_message_id)
                fresh.append(record)

            if not fresh:
                logger.debug("message_summaries_all_seen", owner=owner, submitted=len(records))
                return 0

            before = conn.total_changes
            # A concurrent sync may have stored some of these since the read
            # above; the unique index turns those into no-ops.
            conn.executemany(
                """
                INSERT INTO message_summaries (
                    owner,
                    provider_message_id,
                    thread_id,
                    sender_name,
                    sender_address,
                    subject,
                    snippet,
                    sent_at,
                    sent_at_ms,
                    is_read
                )
                VALUES (
                    :owner,
                    :provider_message_id,
                    :thread_id,
                    :sender_name,
                    :sender_address,
                    :subject,
                    :snippet,
                    :sent_at,
                    :sent_at_ms,
                    :is_read
                )
                ON CONFLICT(owner, provider_message_id) DO NOTHING
                """,
                [
                    {
                        "owner": owner,
                        "provider_message_id": r.provider_message_id,
                        "thread_id": r.thread_id,
                        "sender_name": r.sender_name,
                        "sender_address": r.sender_address,
                        "subject": r.subject,
                        "snippet": r.snippet,
                        "sent_at": r.sent_at,
                        "sent_at_ms": sent_at_sort_key(r.sent_at),
                        "is_read": 1 if r.is_read else 0,
                    }
                    for r in fresh
                ],
            )
            inserted = conn.total_changes - before
            conn.commit()

        logger.info(
            "message_summaries_inserted",
            owner=owner,
            submitted=len(records),
            inserted=inserted,
        )
        return inserted

    def list_by_owner(self, owner: str, limit: int | None = None) -> list[MessageSummary]:
        """Return the owner's summaries, most recent `sent_at` first."""

        sql = """
            SELECT
                owner,
                provider_message_id,
                thread_id,
                sender_name,
                sender_address,
                subject,
                snippet,
                sent_at,
                is_read
            FROM message_summaries
            WHERE owner = ?
            ORDER BY COALESCE(sent_at_ms, ?) DESC, rowid ASC
        """
        params: tuple[object, ...] = (owner, _OLDEST)
        if limit is not None:
            sql += " LIMIT ?"
            params += (limit,)

        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()

        return [self._row_to_summary(row) for row in rows]

    def count_by_owner(self, owner: str) -> int:
        with self._connect() as conn:
            (total,) = conn.execute(
                "SELECT COUNT(*) FROM message_summaries WHERE owner = ?",
                (owner,),
            ).fetchone()
        return int(total or 0)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with sqlite.connect(self._db_path) as conn:
            yield conn

    def _create_schema_v1(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS message_summaries (
                rowid INTEGER PRIMARY KEY,
                owner TEXT NOT NULL,
                provider_message_id TEXT NOT NULL,
                thread_id TEXT NOT NULL,
                sender_name TEXT NOT NULL,
                sender_address TEXT NOT NULL,
                subject TEXT NOT NULL,
                snippet TEXT NOT NULL,
                sent_at TEXT NOT NULL,
                sent_at_ms INTEGER,
                is_read INTEGER NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_message_summaries_owner
                ON message_summaries(owner);

            CREATE UNIQUE INDEX IF NOT EXISTS idx_message_summaries_owner_message
                ON message_summaries(owner, provider_message_id);
            """
        )

    def _row_to_summary(self, row: sqlite3.Row) -> MessageSummary:
        return MessageSummary(
            owner=row["owner"],
            provider_message_id=row["provider_message_id"],
            thread_id=row["thread_id"],
            sender_name=row["sender_name"],
            sender_address=row["sender_address"],
            subject=row["subject"],
            snippet=row["snippet"],
            sent_at=row["sent_at"],
            is_read=bool(row["is_read"]),
        )
