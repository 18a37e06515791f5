"""Gmail API client implementation.

This module provides a client for the two Gmail endpoints the sync needs:
users.messages.list and users.messages.get (format=metadata).

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the rest of the codebase can remain async-friendly.
    httplib2 connections are not thread-safe, so every call builds its own
    service and transport.

    Access tokens are used as-is. Acquiring and refreshing them is the job of
    whatever signed the user in; a 401 is reported like any other HTTP error.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httplib2
import structlog
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from pydantic import ValidationError

from inbox_sync.config import Settings
from inbox_sync.exceptions import ItemFetchFailure, TransportError
from inbox_sync.models import MessageRef

logger = structlog.get_logger()

ServiceFactory = Callable[[str], Any]

_NETWORK_ERRORS = (httplib2.HttpLib2Error, GoogleAuthError, OSError)


def _error_body(exc: HttpError) -> str:
    content = exc.content
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return str(content or "")


class GmailClient:
    """Gmail API client for bearer-token message retrieval.

    Every operation takes the caller's access token explicitly; the client
    holds no per-user state.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        service_factory: ServiceFactory | None = None,
    ) -> None:
        """Initialize Gmail client.

        Args:
            settings: Application settings. If None, uses default settings.
            service_factory: Builds a Gmail service for an access token.
                Defaults to a googleapiclient service over httplib2.
        """
        from inbox_sync.config import get_settings

        self.settings = settings or get_settings()
        self._service_factory = service_factory or self._build_service
        logger.info("gmail_client_initialized", timeout=self.settings.request_timeout)

    async def list_message_ids(self, token: str, limit: int | None = None) -> list[MessageRef]:
        """List the most recent message ids of the token's mailbox.

        Args:
            token: OAuth access token.
            limit: Maximum number of ids to return. Defaults to settings.

        Returns:
            Up to `limit` message references, newest first as Gmail orders them.

        Raises:
            TransportError: If the request fails or returns a non-2xx status.
        """

        resolved_limit = limit or self.settings.gmail_list_limit
        logger.info("listing_messages", max_results=resolved_limit)

        try:
            response = await asyncio.to_thread(self._list_messages_sync, token, resolved_limit)
        except HttpError as exc:
            body = _error_body(exc)
            logger.warning("gmail_list_messages_failed", status=exc.resp.status, error=body)
            raise TransportError(body or str(exc), status=exc.resp.status, body=body) from exc
        except _NETWORK_ERRORS as exc:
            logger.exception("gmail_list_messages_failed", error=str(exc))
            raise TransportError(str(exc) or type(exc).__name__) from exc

        refs: list[MessageRef] = []
        for entry in response.get("messages", []) or []:
            try:
                refs.append(MessageRef.model_validate(entry))
            except ValidationError:
                logger.debug("gmail_list_entry_skipped", entry=entry)
        return refs[:resolved_limit]

    async def get_message_detail(self, token: str, message_id: str) -> dict[str, Any] | None:
        """Get the metadata of a single message.

        Only the headers in `settings.gmail_metadata_headers` are requested.

        Args:
            token: OAuth access token.
            message_id: The Gmail message ID.

        Returns:
            The raw message dict, or None if the request failed.
        """

        try:
            return await self.fetch_message_detail(token, message_id)
        except ItemFetchFailure as exc:
            logger.warning("gmail_get_message_failed", message_id=message_id, error=exc.reason)
            return None

    async def fetch_message_detail(self, token: str, message_id: str) -> dict[str, Any]:
        """Like `get_message_detail` but raises ItemFetchFailure instead of returning None."""

        logger.debug("getting_message", message_id=message_id)

        try:
            return await asyncio.to_thread(self._get_message_sync, token, message_id)
        except HttpError as exc:
            raise ItemFetchFailure(message_id, f"HTTP {exc.resp.status}: {_error_body(exc)}") from exc
        except _NETWORK_ERRORS as exc:
            raise ItemFetchFailure(message_id, str(exc) or type(exc).__name__) from exc

    def _build_service(self, token: str) -> Any:
        # Imported lazily to keep import-time cost low and tests fast.
        from google.oauth2.credentials import Credentials
        from google_auth_httplib2 import AuthorizedHttp
        from googleapiclient.discovery import build

        creds = Credentials(token=token)
        http = AuthorizedHttp(
            creds,
            http=httplib2.Http(timeout=self.settings.request_timeout),
            # No refresh token is available; surface 401s instead of retrying.
            refresh_status_codes=(),
        )
        # cache_discovery=False prevents writing discovery docs to disk.
        return build("gmail", "v1", http=http, cache_discovery=False)

    def _list_messages_sync(self, token: str, max_results: int) -> dict[str, Any]:
        service = self._service_factory(token)
        request = (
            service.users()
            .messages()
            .list(userId=self.settings.gmail_user_id, maxResults=max_results)
        )
        return request.execute()

    def _get_message_sync(self, token: str, message_id: str) -> dict[str, Any]:
        service = self._service_factory(token)
        request = (
            service.users()
            .messages()
            .get(
                userId=self.settings.gmail_user_id,
                id=message_id,
                format="metadata",
                metadataHeaders=list(self.settings.gmail_metadata_headers),
            )
        )
        return request.execute()
