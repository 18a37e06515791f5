"""Mail sync implementation.

This module provides the service that pulls recent Gmail messages for a user
and stores the ones the user has not seen yet.
"""

from __future__ import annotations

import asyncio
import sqlite3
from typing import Any, Protocol

import structlog

from inbox_sync.auth import CredentialProvider
from inbox_sync.config import Settings
from inbox_sync.exceptions import MissingCredential, SyncError, TransportError, Unauthenticated
from inbox_sync.gmail.parsing import extract_summary
from inbox_sync.models import MessageRef, MessageSummary, SyncErrorCode, SyncResult
from inbox_sync.store import MessageSummaryRepository

logger = structlog.get_logger()

MISSING_CREDENTIAL_MESSAGE = (
    "No access token found. Please sign out and sign in again to grant Gmail access."
)


class MessageSource(Protocol):
    """The part of GmailClient the sync depends on."""

    async def list_message_ids(self, token: str, limit: int | None = None) -> list[MessageRef]:
        ...

    async def get_message_detail(self, token: str, message_id: str) -> dict[str, Any] | None:
        ...


class MailSyncService:
    """Fetch, normalize, deduplicate and persist a user's recent messages.

    A sync lists the newest message ids, fetches the details of at most
    `gmail_detail_batch_cap` of them concurrently and hands whatever could be
    parsed to the repository. A message that fails to fetch or parse is
    dropped on its own; it never fails the sync.
    """

    def __init__(
        self,
        gmail_client: MessageSource,
        repository: MessageSummaryRepository,
        credentials: CredentialProvider,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the sync service.

        Args:
            gmail_client: Source of message ids and message details.
            repository: Store receiving the summaries.
            credentials: Looks up each user's access token.
            settings: Application settings. If None, uses default settings.
        """
        from inbox_sync.config import get_settings

        self.settings = settings or get_settings()
        self.gmail_client = gmail_client
        self.repository = repository
        self.credentials = credentials
        logger.info(
            "mail_sync_service_initialized",
            list_limit=self.settings.gmail_list_limit,
            batch_cap=self.settings.gmail_detail_batch_cap,
        )

    async def sync(self, user_id: str | None) -> SyncResult:
        """Sync the user's most recent messages into the store.

        Args:
            user_id: Local user to sync for.

        Returns:
            SyncResult. `count` is the number of newly stored summaries and
            `fetched` the number handed to storage before deduplication.
            Aborted syncs are reported through `error_code` and `error`.
        """
        log = logger.bind(user_id=user_id)
        log.info("sync_started")

        try:
            token = self._resolve_token(user_id)
            refs = await self._list_messages(token)
        except SyncError as exc:
            log.warning("sync_aborted", code=exc.code, reason=exc.reason)
            return SyncResult(success=False, error_code=SyncErrorCode(exc.code), error=exc.reason)

        assert user_id is not None
        batch = refs[: self.settings.gmail_detail_batch_cap]
        summaries = await self._fetch_summaries(user_id, token, batch)

        try:
            inserted = await asyncio.to_thread(
                self.repository.bulk_insert_if_absent, user_id, summaries
            )
        except sqlite3.Error as exc:
            log.exception("sync_store_failed", fetched=len(summaries), error=str(exc))
            return SyncResult(
                success=False,
                fetched=len(summaries),
                error_code=SyncErrorCode.STORE_ERROR,
                error=f"Failed to store emails: {exc}",
            )

        log.info(
            "sync_completed",
            listed=len(refs),
            requested=len(batch),
            fetched=len(summaries),
            inserted=inserted,
        )
        return SyncResult(success=True, count=inserted, fetched=len(summaries))

    def list_summaries(self, user_id: str | None, limit: int | None = None) -> list[MessageSummary]:
        """Return the user's stored summaries, newest first."""
        if not user_id:
            return []
        return self.repository.list_by_owner(user_id, limit=limit)

    def _resolve_token(self, user_id: str | None) -> str:
        if not user_id:
            raise Unauthenticated("Not authenticated")

        token = self.credentials.get_access_token(user_id)
        if not token:
            raise MissingCredential(MISSING_CREDENTIAL_MESSAGE)
        return token

    async def _list_messages(self, token: str) -> list[MessageRef]:
        try:
            return await self.gmail_client.list_message_ids(token, self.settings.gmail_list_limit)
        except TransportError as exc:
            raise TransportError(
                f"Failed to fetch emails: {exc.reason}",
                status=exc.status,
                body=exc.body,
            ) from exc

    async def _fetch_summaries(
        self,
        user_id: str,
        token: str,
        refs: list[MessageRef],
    ) -> list[MessageSummary]:
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def fetch_one(ref: MessageRef) -> MessageSummary | None:
            async with semaphore:
                raw = await self.gmail_client.get_message_detail(token, ref.id)
            if raw is None:
                return None
            summary = extract_summary(user_id, raw)
            if summary is None:
                logger.warning("gmail_message_unparseable", message_id=ref.id)
            return summary

        # Wait for every fetch; one failure must not cancel the others.
        results = await asyncio.gather(*(fetch_one(ref) for ref in refs), return_exceptions=True)

        summaries: list[MessageSummary] = []
        for ref, result in zip(refs, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "gmail_message_dropped",
                    message_id=ref.id,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                continue
            if result is not None:
                summaries.append(result)
        return summaries
