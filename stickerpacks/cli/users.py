"""Operator CLI for managing login accounts.

There is no self-service signup; moderators and submitters are created
here and then sign in through ``POST /login``.

Usage::

    python -m stickerpacks.cli.users add --username alice --role moderator
    python -m stickerpacks.cli.users add --username bob --password s3cret
    python -m stickerpacks.cli.users list

The password is prompted for when ``--password`` is omitted.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

from stickerpacks.config.loader import load_config
from stickerpacks.config.settings import Settings
from stickerpacks.models.user import UserRole
from stickerpacks.providers.user.sqlite_user_provider import SQLiteUserProvider
from stickerpacks.services.auth_service import DEFAULT_BCRYPT_ROUNDS, AuthService
from stickerpacks.utils.errors import StickerPackError


def _build_auth_service(
    app_settings: Settings, db_path: str | None
) -> tuple[SQLiteUserProvider, AuthService]:
    config = load_config(settings=app_settings)
    rounds = int((config.get("auth") or {}).get("bcrypt_rounds", DEFAULT_BCRYPT_ROUNDS))
    store = SQLiteUserProvider(db_path=db_path or app_settings.users_db_path)
    return store, AuthService(user_store=store, rounds=rounds)


async def _handle_add(args: argparse.Namespace, store: SQLiteUserProvider, service: AuthService) -> int:
    """Register one user."""
    password = args.password
    if password is None:
        password = getpass.getpass(f"Password for {args.username}: ")

    await store.initialize()
    try:
        principal = await service.register(
            args.username,
            password,
            role=args.role,
            display_name=args.display_name or "",
        )
    except StickerPackError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    print(f"Created {principal.role.value} {principal.username} ({principal.id})")
    return 0


async def _handle_list(store: SQLiteUserProvider, service: AuthService) -> int:
    """Print every registered user."""
    await store.initialize()
    users = await service.list_users()
    if not users:
        print("No users registered.")
        return 0

    for user in users:
        print(f"{user.id}  {user.role.value:<10}  {user.username}  {user.display_name}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m stickerpacks.cli.users",
        description="Manage sticker pack service login accounts.",
    )
    parser.add_argument(
        "--db-path",
        dest="db_path",
        default=None,
        help="User database path (default: USERS_DB_PATH setting)",
    )
    subparsers = parser.add_subparsers(dest="command", help="User commands")

    # -- add --
    add_parser = subparsers.add_parser("add", help="Create a user")
    add_parser.add_argument("--username", required=True, help="Login name")
    add_parser.add_argument(
        "--role",
        choices=[role.value for role in UserRole],
        default=UserRole.SUBMITTER.value,
        help="Role (default: submitter)",
    )
    add_parser.add_argument("--display-name", dest="display_name", help="Name shown in the UI")
    add_parser.add_argument("--password", help="Password (prompted when omitted)")

    # -- list --
    subparsers.add_parser("list", help="List users")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the command and return its exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    app_settings = Settings()
    store, service = _build_auth_service(app_settings, args.db_path)

    if args.command == "add":
        return asyncio.run(_handle_add(args, store, service))
    if args.command == "list":
        return asyncio.run(_handle_list(store, service))

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
