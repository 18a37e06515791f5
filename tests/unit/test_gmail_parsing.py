"""Unit tests for Gmail metadata parsing helpers."""

from datetime import datetime, timezone

from inbox_sync.gmail.parsing import (
    extract_summary,
    header_value,
    parse_detail,
    parse_sender,
    parse_sent_at,
    sent_at_sort_key,
)
from inbox_sync.models import MessageHeader


def test_extract_summary_parses_basic_fields(sample_message_data) -> None:
    summary = extract_summary("user-1", sample_message_data)

    assert summary is not None
    assert summary.owner == "user-1"
    assert summary.provider_message_id == "msg123456"
    assert summary.thread_id == "thread789"
    assert summary.sender_name == "Python Weekly"
    assert summary.sender_address == "newsletter@python.org"
    assert summary.subject == "Weekly Newsletter - Python Tips"
    assert summary.snippet == "Welcome to this week's Python tips!"
    assert summary.sent_at == "Tue, 02 Jan 2024 09:30:00 +0000"
    assert summary.is_read is False


def test_parse_sender_with_quoted_display_name() -> None:
    assert parse_sender('"Jane Doe" <jane@x.com>') == ("Jane Doe", "jane@x.com")


def test_parse_sender_without_angle_brackets() -> None:
    assert parse_sender("noreply@x.com") == ("noreply@x.com", "noreply@x.com")


def test_parse_sender_empty() -> None:
    assert parse_sender("") == ("", "")


def test_missing_subject_uses_placeholder(make_message) -> None:
    summary = extract_summary("user-1", make_message("m1", subject=None))

    assert summary is not None
    assert summary.subject == "(No Subject)"


def test_empty_subject_uses_placeholder(make_message) -> None:
    summary = extract_summary("user-1", make_message("m1", subject=""))

    assert summary is not None
    assert summary.subject == "(No Subject)"


def test_read_state_from_labels(make_message) -> None:
    unread = extract_summary("u", make_message("m1", labels=["INBOX", "UNREAD"]))
    important = extract_summary("u", make_message("m2", labels=["IMPORTANT"]))
    no_labels = extract_summary("u", make_message("m3"))

    assert unread is not None and unread.is_read is False
    assert important is not None and important.is_read is True
    assert no_labels is not None and no_labels.is_read is True


def test_header_lookup_is_case_sensitive_and_first_wins() -> None:
    headers = [
        MessageHeader(name="subject", value="lower"),
        MessageHeader(name="Subject", value="first"),
        MessageHeader(name="Subject", value="second"),
    ]

    assert header_value(headers, "Subject") == "first"
    assert header_value(headers, "Date") == ""


def test_malformed_fields_degrade_to_defaults() -> None:
    summary = extract_summary(
        "u",
        {
            "id": "m1",
            "threadId": None,
            "snippet": 42,
            "labelIds": "UNREAD",
            "payload": {"headers": [{"name": "From"}, "junk", {"name": "Date", "value": 7}]},
        },
    )

    assert summary is not None
    assert summary.thread_id == ""
    assert summary.snippet == ""
    assert summary.sender_name == ""
    assert summary.sender_address == ""
    assert summary.sent_at == ""
    assert summary.subject == "(No Subject)"
    assert summary.is_read is True


def test_payload_without_id_is_unparseable() -> None:
    assert extract_summary("u", {"snippet": "orphan"}) is None
    assert extract_summary("u", {"id": "   "}) is None
    assert extract_summary("u", "not a message") is None
    assert parse_detail(None) is None


def test_parse_sent_at_rfc2822_and_iso() -> None:
    assert parse_sent_at("Tue, 02 Jan 2024 09:30:00 +0000") == datetime(
        2024, 1, 2, 9, 30, tzinfo=timezone.utc
    )
    assert parse_sent_at("2024-01-03") == datetime(2024, 1, 3, tzinfo=timezone.utc)


def test_parse_sent_at_unparseable() -> None:
    assert parse_sent_at("") is None
    assert parse_sent_at(None) is None
    assert parse_sent_at("sometime last week") is None
    assert sent_at_sort_key("sometime last week") is None


def test_sent_at_sort_key_orders_by_instant() -> None:
    earlier = sent_at_sort_key("Mon, 01 Jan 2024 10:00:00 +0100")
    later = sent_at_sort_key("Mon, 01 Jan 2024 09:30:00 +0000")

    assert earlier is not None and later is not None
    assert earlier < later
