"""SQLite-backed sticker pack submission store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing ISubmissionProvider).
#
# Database: ``data/stickerpacks.db`` by default: one ``stickerpacks``
# table.  List-valued and pass-through fields (asset_refs, tags, events,
# lifespan, location) are stored as JSON text.
#
# Atomicity: each mutation is one statement.
#   - create         → INSERT
#   - update_status  → UPDATE … RETURNING (needs SQLite >= 3.35)
#   - delete         → DELETE
# ``seq`` (AUTOINCREMENT) gives a stable insertion order for listings.
#
# Uses ``aiosqlite`` for async I/O and ``PRAGMA journal_mode=WAL`` so
# listings can read while a moderator action is writing.  Any
# ``aiosqlite.Error`` is surfaced as StorageUnavailableError.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4

import aiosqlite
import structlog

from stickerpacks.interfaces.submission_provider import ISubmissionProvider
from stickerpacks.models.submission import ApprovalStatus, SubmissionDraft, SubmissionRecord
from stickerpacks.utils.errors import StorageUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/stickerpacks.db")

# ── Schema DDL ────────────────────────────────────────────────────────

_CREATE_TABLE = """\
CREATE TABLE IF NOT EXISTS stickerpacks (
    seq              INTEGER PRIMARY KEY AUTOINCREMENT,
    id               TEXT    NOT NULL UNIQUE,
    owner_id         TEXT    NOT NULL,
    name             TEXT    NOT NULL DEFAULT '',
    description      TEXT    NOT NULL DEFAULT '',
    asset_refs       TEXT    NOT NULL,
    approval_status  TEXT    NOT NULL DEFAULT 'pending'
                     CHECK (approval_status IN ('pending', 'approved', 'rejected')),
    tags             TEXT,
    events           TEXT,
    lifespan         TEXT,
    location         TEXT,
    created_at       TEXT    NOT NULL,
    moderated_at     TEXT
);
"""

_CREATE_INDICES = [
    "CREATE INDEX IF NOT EXISTS idx_stickerpacks_owner ON stickerpacks(owner_id);",
    "CREATE INDEX IF NOT EXISTS idx_stickerpacks_status ON stickerpacks(approval_status);",
]

# ── DML ───────────────────────────────────────────────────────────────

_COLUMNS = (
    "id, owner_id, name, description, asset_refs, approval_status, "
    "tags, events, lifespan, location, created_at, moderated_at"
)

_INSERT = f"""\
INSERT INTO stickerpacks ({_COLUMNS})
VALUES (?, ?, ?, ?, ?, 'pending', ?, ?, ?, ?, ?, NULL);
"""

_SELECT_ALL = f"SELECT {_COLUMNS} FROM stickerpacks ORDER BY seq;"

_SELECT_BY_STATUS = f"SELECT {_COLUMNS} FROM stickerpacks WHERE approval_status = ? ORDER BY seq;"

_SELECT_BY_OWNER = f"SELECT {_COLUMNS} FROM stickerpacks WHERE owner_id = ? ORDER BY seq;"

# moderated_at is evaluated against the pre-update row, so re-applying
# the current status leaves it untouched.
_UPDATE_STATUS = f"""\
UPDATE stickerpacks
SET moderated_at = CASE WHEN approval_status = :status THEN moderated_at ELSE :now END,
    approval_status = :status
WHERE id = :id
RETURNING {_COLUMNS};
"""

_DELETE = "DELETE FROM stickerpacks WHERE id = ?;"


def _dump(value: Any) -> str | None:
    return None if value is None else json.dumps(value)


def _load(value: str | None) -> Any:
    return None if value is None else json.loads(value)


class SQLiteSubmissionProvider(ISubmissionProvider):
    """SQLite-backed submission persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    def get_provider_name(self) -> str:
        return "sqlite_submission"

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection, translating driver errors to StorageUnavailableError."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.Error as exc:
            logger.error("submission_store_error", path=str(self._db_path), error=str(exc))
            raise StorageUnavailableError(
                message=f"Submission store failure: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def initialize(self) -> None:
        """Create the stickerpacks table and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_TABLE)
            for idx_sql in _CREATE_INDICES:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("submission_db_initialized", path=str(self._db_path))

    # ── Writes ─────────────────────────────────────────────────────────

    async def create(self, draft: SubmissionDraft) -> SubmissionRecord:
        record_id = uuid4().hex
        created_at = datetime.now(timezone.utc).isoformat()
        async with self._connect() as db:
            await db.execute(_INSERT, (
                record_id,
                draft.owner_id,
                draft.name,
                draft.description,
                json.dumps(draft.asset_refs),
                _dump(draft.tags),
                _dump(draft.events),
                _dump(draft.lifespan),
                _dump(draft.location),
                created_at,
            ))
            await db.commit()

        return SubmissionRecord(
            id=record_id,
            owner_id=draft.owner_id,
            name=draft.name,
            description=draft.description,
            asset_refs=list(draft.asset_refs),
            approval_status=ApprovalStatus.PENDING,
            tags=draft.tags,
            events=draft.events,
            lifespan=draft.lifespan,
            location=draft.location,
            created_at=created_at,
        )

    async def update_status(
        self, record_id: str, status: ApprovalStatus
    ) -> SubmissionRecord | None:
        now = datetime.now(timezone.utc).isoformat()
        async with self._connect() as db:
            cursor = await db.execute(
                _UPDATE_STATUS,
                {"status": ApprovalStatus(status).value, "now": now, "id": record_id},
            )
            row = await cursor.fetchone()
            await cursor.close()
            await db.commit()
        return self._row_to_record(row) if row else None

    async def delete(self, record_id: str) -> bool:
        async with self._connect() as db:
            cursor = await db.execute(_DELETE, (record_id,))
            await db.commit()
            return cursor.rowcount > 0

    # ── Reads ──────────────────────────────────────────────────────────

    async def list_all(self, status: ApprovalStatus | None = None) -> list[SubmissionRecord]:
        async with self._connect() as db:
            if status is None:
                cursor = await db.execute(_SELECT_ALL)
            else:
                cursor = await db.execute(_SELECT_BY_STATUS, (ApprovalStatus(status).value,))
            rows = await cursor.fetchall()
        return [self._row_to_record(r) for r in rows]

    async def list_by_owner(self, owner_id: str) -> list[SubmissionRecord]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_BY_OWNER, (owner_id,))
            rows = await cursor.fetchall()
        return [self._row_to_record(r) for r in rows]

    # ── Helpers ────────────────────────────────────────────────────────

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> SubmissionRecord:
        return SubmissionRecord(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            description=row["description"],
            asset_refs=json.loads(row["asset_refs"]),
            approval_status=ApprovalStatus(row["approval_status"]),
            tags=_load(row["tags"]),
            events=_load(row["events"]),
            lifespan=_load(row["lifespan"]),
            location=_load(row["location"]),
            created_at=row["created_at"],
            moderated_at=row["moderated_at"],
        )
