"""Helpers for turning Gmail message metadata into summary records."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from pydantic import ValidationError

from inbox_sync.models import NO_SUBJECT, MessageDetail, MessageHeader, MessageSummary

UNREAD_LABEL = "UNREAD"

# "Display Name <address>"; anything without angle brackets is left as-is.
_SENDER_RE = re.compile(r"^(.+?)\s*<(.+?)>$")


def header_value(headers: list[MessageHeader], name: str) -> str:
    """Return the first header called exactly `name`, or an empty string."""
    for h in headers:
        if h.name == name:
            return h.value
    return ""


def parse_sender(raw: str) -> tuple[str, str]:
    """Split a From header into (display name, address).

    Args:
        raw: Raw From header value.

    Returns:
        The display name with double quotes removed and the bracketed address.
        When the header has no `<address>` part both values are `raw`.
    """
    match = _SENDER_RE.match(raw)
    if match is None:
        return raw, raw
    return match.group(1).replace('"', ""), match.group(2)


def is_read(label_ids: list[str] | None) -> bool:
    return UNREAD_LABEL not in (label_ids or [])


def parse_detail(message: Any) -> MessageDetail | None:
    """Validate a raw users.messages.get response.

    Returns None when the payload is not a mapping or has no usable id.
    """
    if not isinstance(message, dict):
        return None
    try:
        return MessageDetail.model_validate(message)
    except ValidationError:
        return None


def extract_summary(owner: str, message: Any) -> MessageSummary | None:
    """Convert a Gmail API message (format=metadata) to MessageSummary.

    Args:
        owner: Local user the summary will belong to.
        message: Gmail API message dict.

    Returns:
        MessageSummary, or None if the payload cannot be identified.
    """

    detail = parse_detail(message)
    if detail is None:
        return None

    sender_name, sender_address = parse_sender(header_value(detail.headers, "From"))

    return MessageSummary(
        owner=owner,
        provider_message_id=detail.id,
        thread_id=detail.thread_id,
        sender_name=sender_name,
        sender_address=sender_address,
        subject=header_value(detail.headers, "Subject") or NO_SUBJECT,
        snippet=detail.snippet,
        sent_at=header_value(detail.headers, "Date"),
        is_read=is_read(detail.label_ids),
    )


def parse_sent_at(value: str | None) -> datetime | None:
    """Parse a Date header into an aware datetime.

    RFC 2822 dates are tried first, then ISO 8601. Naive results are taken
    to be UTC.
    """
    if not value:
        return None

    parsed: datetime | None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError, OverflowError):
        parsed = None

    if parsed is None:
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sent_at_sort_key(value: str | None) -> int | None:
    """Milliseconds since the epoch for `value`, or None if it can't be parsed."""
    parsed = parse_sent_at(value)
    if parsed is None:
        return None
    try:
        return int(parsed.timestamp() * 1000)
    except (OverflowError, OSError, ValueError):
        return None
