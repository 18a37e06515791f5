"""Unit tests for the command-line interface."""

from __future__ import annotations

import pytest
import structlog

from inbox_sync import cli
from inbox_sync.config import get_settings


@pytest.fixture
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path, fake_gmail):
    monkeypatch.setenv("INBOX_SYNC_STORE_DB_PATH", str(tmp_path / "cli.sqlite3"))
    monkeypatch.setenv("INBOX_SYNC_LOG_LEVEL", "WARNING")
    monkeypatch.setattr(cli, "GmailClient", lambda settings: fake_gmail)
    get_settings.cache_clear()
    yield fake_gmail
    get_settings.cache_clear()
    structlog.reset_defaults()


def test_sync_without_token_fails(cli_env, capsys) -> None:
    assert cli.main(["sync", "--user", "alice"]) == 1
    assert "No access token found" in capsys.readouterr().out


def test_token_sync_and_list(cli_env, capsys, make_message) -> None:
    cli_env.details = {
        "m1": make_message("m1", subject="Older", date="2024-01-01"),
        "m2": make_message("m2", subject="Newer", date="2024-01-02", labels=["UNREAD"]),
    }

    assert cli.main(["token", "set", "--user", "alice", "--token", "tok"]) == 0
    assert cli.main(["sync", "--user", "alice"]) == 0
    assert cli.main(["list", "--user", "alice"]) == 0

    out = capsys.readouterr().out
    assert "Synced 2 messages (2 new) for alice" in out
    lines = [line for line in out.splitlines() if "\t" in line]
    assert lines[0].startswith("UNREAD\t2024-01-02\tSender\tNewer")
    assert lines[1].startswith("READ\t2024-01-01\tSender\tOlder")
