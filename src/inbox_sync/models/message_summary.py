"""Summary record stored per synced message.

Only display fields are kept: no body, no recipients. Records are created by
the sync and never modified afterwards.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

NO_SUBJECT = "(No Subject)"


class MessageSummary(BaseModel):
    """A normalized, display-ready view of one Gmail message."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(description="Local user the record belongs to")
    provider_message_id: str = Field(description="Gmail message ID")
    thread_id: str = Field(default="", description="Gmail thread ID")

    sender_name: str = Field(default="", description="Display name parsed from From")
    sender_address: str = Field(default="", description="Address parsed from From")

    subject: str = Field(default=NO_SUBJECT, description="Subject header")
    snippet: str = Field(default="", description="Provider preview text")

    # Raw Date header, exactly as Gmail reported it.
    sent_at: str = Field(default="", description="Date header")

    is_read: bool = Field(default=True, description="False when the UNREAD label is present")
