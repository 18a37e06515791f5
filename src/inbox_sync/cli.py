"""Command-line interface for Inbox Sync.

This module provides a small developer entry point around the sync service:
store a token for a user, run a sync, and list what has been stored.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from inbox_sync.auth import AccountRepository
from inbox_sync.config import Settings, get_settings
from inbox_sync.gmail.client import GmailClient
from inbox_sync.store import MessageSummaryRepository
from inbox_sync.sync import MailSyncService
from inbox_sync.utils import configure_logging

logger = structlog.get_logger()


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--user", required=True, help="Local user id")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Path to the SQLite database (default: settings store_db_path)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inbox-sync", description="Inbox Sync")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Fetch recent Gmail messages for a user")
    _add_common_args(sync_parser)

    list_parser = subparsers.add_parser("list", help="Show a user's stored messages, newest first")
    _add_common_args(list_parser)
    list_parser.add_argument("--limit", type=int, default=None, help="Max results")

    token_parser = subparsers.add_parser("token", help="Manage stored access tokens")
    token_sub = token_parser.add_subparsers(dest="token_command", required=True)
    set_parser = token_sub.add_parser("set", help="Store an OAuth access token for a user")
    _add_common_args(set_parser)
    set_parser.add_argument("--token", required=True, help="OAuth access token")

    return parser


def _build_service(settings: Settings, db_path: Path) -> MailSyncService:
    repository = MessageSummaryRepository(db_path)
    repository.initialize()
    accounts = AccountRepository(db_path)
    accounts.initialize()
    return MailSyncService(GmailClient(settings), repository, accounts, settings)


async def _cmd_sync(args: argparse.Namespace, settings: Settings) -> int:
    service = _build_service(settings, args.db or settings.store_db_path)
    result = await service.sync(args.user)

    if not result.success:
        print(f"Sync failed: {result.error}")
        return 1

    print(f"Synced {result.fetched} messages ({result.count} new) for {args.user}")
    return 0


def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    service = _build_service(settings, args.db or settings.store_db_path)

    for s in service.list_summaries(args.user, limit=args.limit):
        state = "READ" if s.is_read else "UNREAD"
        sender = s.sender_name or s.sender_address or "(unknown sender)"
        print(f"{state}\t{s.sent_at or '(no date)'}\t{sender}\t{s.subject}")

    return 0


def _cmd_token_set(args: argparse.Namespace, settings: Settings) -> int:
    accounts = AccountRepository(args.db or settings.store_db_path)
    accounts.initialize()
    accounts.save_access_token(args.user, args.token)
    print(f"Stored access token for {args.user}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Inbox Sync CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()
    configure_logging(settings)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    logger.info("inbox_sync_started", command=parsed.command, debug=settings.debug)

    if parsed.command == "sync":
        return asyncio.run(_cmd_sync(parsed, settings))
    if parsed.command == "list":
        return _cmd_list(parsed, settings)
    if parsed.command == "token" and parsed.token_command == "set":
        return _cmd_token_set(parsed, settings)

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
