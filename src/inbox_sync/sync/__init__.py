"""Fetch-normalize-dedup-persist pipeline."""

from .service import MailSyncService

__all__ = ["MailSyncService"]
