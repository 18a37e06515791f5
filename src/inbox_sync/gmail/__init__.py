"""Gmail API access and message parsing."""

from .client import GmailClient
from .parsing import extract_summary, parse_sent_at

__all__ = ["GmailClient", "extract_summary", "parse_sent_at"]
