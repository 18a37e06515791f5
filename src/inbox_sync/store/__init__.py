"""Local persistence for synced message summaries.

Summaries are stored in SQLite, one row per (owner, Gmail message id), and
never updated once written.
"""

from .repository import MessageSummaryRepository

__all__ = ["MessageSummaryRepository"]
