"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from inbox_sync.models import MessageRef


@pytest.fixture
def mock_settings(tmp_path):
    """Provide settings pointing at a throwaway database."""
    from inbox_sync.config import Settings

    return Settings(
        store_db_path=tmp_path / "inbox.sqlite3",
        request_timeout=5,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def sample_message_data() -> dict:
    """Provide a users.messages.get response (format=metadata)."""
    return {
        "id": "msg123456",
        "threadId": "thread789",
        "labelIds": ["INBOX", "UNREAD"],
        "snippet": "Welcome to this week's Python tips!",
        "payload": {
            "headers": [
                {"name": "From", "value": '"Python Weekly" <newsletter@python.org>'},
                {"name": "Subject", "value": "Weekly Newsletter - Python Tips"},
                {"name": "Date", "value": "Tue, 02 Jan 2024 09:30:00 +0000"},
            ],
        },
    }


@pytest.fixture
def make_message() -> Callable[..., dict]:
    """Build Gmail message dicts with sensible defaults."""

    def _make(
        message_id: str,
        *,
        sender: str = "Sender <sender@example.com>",
        subject: str | None = "Hello",
        date: str = "Mon, 01 Jan 2024 10:00:00 +0000",
        labels: list[str] | None = None,
    ) -> dict:
        headers = [{"name": "From", "value": sender}, {"name": "Date", "value": date}]
        if subject is not None:
            headers.append({"name": "Subject", "value": subject})
        message: dict[str, Any] = {
            "id": message_id,
            "threadId": f"t-{message_id}",
            "snippet": f"snippet {message_id}",
            "payload": {"headers": headers},
        }
        if labels is not None:
            message["labelIds"] = labels
        return message

    return _make


class FakeGmailClient:
    """In-memory stand-in for GmailClient."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        # Insertion order is the list order; None means the fetch failed.
        self.details: dict[str, Any] = dict(details or {})
        self.list_error: Exception | None = None
        self.tokens: list[str] = []
        self.list_calls: list[int | None] = []
        self.fetched: list[str] = []

    async def list_message_ids(self, token: str, limit: int | None = None) -> list[MessageRef]:
        self.tokens.append(token)
        self.list_calls.append(limit)
        if self.list_error is not None:
            raise self.list_error
        refs = [MessageRef(id=mid, thread_id=f"t-{mid}") for mid in self.details]
        return refs if limit is None else refs[:limit]

    async def get_message_detail(self, token: str, message_id: str) -> dict[str, Any] | None:
        self.tokens.append(token)
        self.fetched.append(message_id)
        value = self.details.get(message_id)
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_gmail() -> FakeGmailClient:
    return FakeGmailClient()
