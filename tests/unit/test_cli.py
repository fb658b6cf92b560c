"""Unit tests for the user-management CLI (stickerpacks.cli.users)."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest

from stickerpacks.cli.users import _build_parser, main
from stickerpacks.providers.user.sqlite_user_provider import SQLiteUserProvider


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    # Keep Settings from reading the developer's .env or config.
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "absent.yaml"))
    return str(tmp_path / "users.db")


def _list_usernames(db_path: str) -> list[str]:
    store = SQLiteUserProvider(db_path=db_path)
    return [u.username for u in asyncio.run(store.list_users())]


class TestParser:
    def test_add_defaults_to_submitter(self):
        args = _build_parser().parse_args(["add", "--username", "alice"])
        assert args.command == "add"
        assert args.role == "submitter"
        assert args.password is None

    def test_unknown_role_rejected(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["add", "--username", "alice", "--role", "admin"])


class TestMain:
    def test_no_command_returns_1(self, db_path, capsys):
        assert main(["--db-path", db_path]) == 1

    def test_add_with_password(self, db_path, capsys):
        code = main([
            "--db-path", db_path,
            "add", "--username", "alice", "--role", "moderator",
            "--display-name", "Alice", "--password", "s3cret",
        ])

        assert code == 0
        assert "Created moderator alice" in capsys.readouterr().out
        assert _list_usernames(db_path) == ["alice"]

    def test_add_prompts_for_password(self, db_path):
        with patch("stickerpacks.cli.users.getpass.getpass", return_value="prompted") as prompt:
            assert main(["--db-path", db_path, "add", "--username", "bob"]) == 0
        prompt.assert_called_once()

    def test_duplicate_user_returns_1(self, db_path, capsys):
        main(["--db-path", db_path, "add", "--username", "alice", "--password", "pw"])
        code = main(["--db-path", db_path, "add", "--username", "alice", "--password", "pw"])

        assert code == 1
        assert "already exists" in capsys.readouterr().err

    def test_list_empty(self, db_path, capsys):
        assert main(["--db-path", db_path, "list"]) == 0
        assert "No users registered." in capsys.readouterr().out

    def test_list_users(self, db_path, capsys):
        main(["--db-path", db_path, "add", "--username", "alice", "--password", "pw"])
        capsys.readouterr()

        assert main(["--db-path", db_path, "list"]) == 0
        out = capsys.readouterr().out
        assert "alice" in out
        assert "submitter" in out
