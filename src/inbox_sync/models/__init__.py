"""Data models for Inbox Sync.

This module contains Pydantic models for data validation and serialization.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from inbox_sync.models.gmail_payload import MessageDetail, MessageHeader, MessagePayload, MessageRef
from inbox_sync.models.message_summary import NO_SUBJECT, MessageSummary


class SyncErrorCode(str, Enum):
    """Reason a sync was aborted."""

    UNAUTHENTICATED = "unauthenticated"
    MISSING_CREDENTIAL = "missing_credential"
    TRANSPORT_ERROR = "transport_error"
    STORE_ERROR = "store_error"


class SyncResult(BaseModel):
    """Outcome of a single sync call, as shown to the user."""

    success: bool = Field(description="Whether the sync completed")
    count: int = Field(default=0, ge=0, description="Records newly stored by this sync")
    fetched: int = Field(
        default=0,
        ge=0,
        description="Records that were fetched, parsed and handed to storage",
    )
    error_code: Optional[SyncErrorCode] = Field(default=None, description="Why the sync failed")
    error: Optional[str] = Field(default=None, description="Error message if failed")


__all__ = [
    "NO_SUBJECT",
    "MessageDetail",
    "MessageHeader",
    "MessagePayload",
    "MessageRef",
    "MessageSummary",
    "SyncErrorCode",
    "SyncResult",
]
