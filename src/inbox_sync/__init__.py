"""Inbox Sync - keep a local, per-user digest of recent Gmail messages.

This package fetches recent message metadata from the Gmail API, normalizes
each message into a small summary record and stores only the records a user
has not seen before.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from inbox_sync.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__", "__author__"]
