"""Custom exceptions for Inbox Sync."""

from __future__ import annotations


class InboxSyncError(Exception):
    """Base exception for all Inbox Sync errors."""


class ConfigurationError(InboxSyncError):
    """Exception raised for configuration related errors."""


class SyncError(InboxSyncError):
    """Exception raised when a sync has to be aborted as a whole."""

    code = "sync_error"

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class Unauthenticated(SyncError):
    """Exception raised when no caller identity is available."""

    code = "unauthenticated"


class MissingCredential(SyncError):
    """Exception raised when the caller has no stored access token."""

    code = "missing_credential"


class TransportError(SyncError):
    """Exception raised when a Gmail API call fails at the HTTP or network level."""

    code = "transport_error"

    def __init__(self, reason: str, *, status: int | None = None, body: str | None = None) -> None:
        super().__init__(reason)
        self.status = status
        self.body = body


class ItemFetchFailure(InboxSyncError):
    """A single message could not be fetched or parsed. Never leaves a sync."""

    def __init__(self, message_id: str, reason: str) -> None:
        super().__init__(f"{message_id}: {reason}")
        self.message_id = message_id
        self.reason = reason
