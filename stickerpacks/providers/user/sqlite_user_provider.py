"""SQLite-backed user principal store.

Same aiosqlite / WAL pattern as the submission store.  Usernames are
unique at the schema level; a clash surfaces as
``ValidationError(DUPLICATE_USER)`` rather than a storage failure.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

import aiosqlite
import structlog

from stickerpacks.interfaces.user_provider import IUserProvider
from stickerpacks.models.user import UserPrincipal, UserRole
from stickerpacks.utils.errors import StorageUnavailableError, ValidationError, ValidationReason

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/users.db")

_CREATE_TABLE = """\
CREATE TABLE IF NOT EXISTS users (
    seq              INTEGER PRIMARY KEY AUTOINCREMENT,
    id               TEXT NOT NULL UNIQUE,
    username         TEXT NOT NULL UNIQUE,
    credential_hash  TEXT NOT NULL,
    role             TEXT NOT NULL CHECK (role IN ('submitter', 'moderator')),
    display_name     TEXT NOT NULL DEFAULT '',
    created_at       TEXT NOT NULL
);
"""

_INSERT = """\
INSERT INTO users (id, username, credential_hash, role, display_name, created_at)
VALUES (?, ?, ?, ?, ?, ?);
"""

_SELECT_BY_ID = "SELECT id, username, role, display_name FROM users WHERE id = ?;"

_SELECT_BY_USERNAME = (
    "SELECT id, username, role, display_name, credential_hash FROM users WHERE username = ?;"
)

_SELECT_ALL = "SELECT id, username, role, display_name FROM users ORDER BY seq;"


class SQLiteUserProvider(IUserProvider):
    """SQLite-backed user storage."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    def get_provider_name(self) -> str:
        return "sqlite_user"

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.IntegrityError as exc:
            raise ValidationError(
                ValidationReason.DUPLICATE_USER,
                provider_name=self.get_provider_name(),
            ) from exc
        except aiosqlite.Error as exc:
            logger.error("user_store_error", path=str(self._db_path), error=str(exc))
            raise StorageUnavailableError(
                message=f"User store failure: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def initialize(self) -> None:
        """Create the users table if it doesn't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_TABLE)
            await db.commit()
        logger.info("user_db_initialized", path=str(self._db_path))

    async def create_user(
        self,
        username: str,
        credential_hash: str,
        role: UserRole,
        display_name: str = "",
    ) -> UserPrincipal:
        principal = UserPrincipal(
            id=uuid4().hex,
            username=username,
            role=UserRole(role),
            display_name=display_name,
        )
        async with self._connect() as db:
            await db.execute(_INSERT, (
                principal.id,
                principal.username,
                credential_hash,
                principal.role.value,
                principal.display_name,
                datetime.now(timezone.utc).isoformat(),
            ))
            await db.commit()

        logger.info("user_created", user_id=principal.id, role=principal.role.value)
        return principal

    async def get_user(self, user_id: str) -> UserPrincipal | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_BY_ID, (user_id,))
            row = await cursor.fetchone()
        return self._row_to_principal(row) if row else None

    async def get_credentials(self, username: str) -> tuple[UserPrincipal, str] | None:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_BY_USERNAME, (username,))
            row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_principal(row), row["credential_hash"]

    async def list_users(self) -> list[UserPrincipal]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_ALL)
            rows = await cursor.fetchall()
        return [self._row_to_principal(r) for r in rows]

    @staticmethod
    def _row_to_principal(row: aiosqlite.Row) -> UserPrincipal:
        return UserPrincipal(
            id=row["id"],
            username=row["username"],
            role=UserRole(row["role"]),
            display_name=row["display_name"],
        )
