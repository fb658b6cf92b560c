"""Unit tests for SQLiteSubmissionProvider.

Runs against a temporary SQLite file so the real data directory is never
touched.
"""

from __future__ import annotations

import asyncio
import os
import tempfile

import pytest

from stickerpacks.models.submission import ApprovalStatus, SubmissionDraft
from stickerpacks.providers.submission.sqlite_submission_provider import SQLiteSubmissionProvider
from stickerpacks.utils.errors import StorageUnavailableError


@pytest.fixture
async def provider():
    """Create a SQLiteSubmissionProvider with a temporary database."""
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    p = SQLiteSubmissionProvider(db_path=tmp.name)
    await p.initialize()
    yield p
    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(tmp.name + suffix):
            os.unlink(tmp.name + suffix)


def _make_draft(owner_id: str = "u1", **kwargs) -> SubmissionDraft:
    fields = {
        "name": "Cats",
        "description": "Assorted cats",
        "asset_refs": ["1700000000000.png"],
        "tags": ["cat", "cute"],
        "events": ["meetup"],
        "lifespan": {"start": "2025-01-01", "end": "2025-12-31"},
        "location": {"lat": 52.5, "long": 13.4},
    }
    fields.update(kwargs)
    return SubmissionDraft(owner_id=owner_id, **fields)


async def _find(provider, record_id: str):
    return next((r for r in await provider.list_all() if r.id == record_id), None)


# ─── Initialization ───────────────────────────────────────────────

@pytest.mark.asyncio
async def test_provider_name(provider):
    assert provider.get_provider_name() == "sqlite_submission"


@pytest.mark.asyncio
async def test_double_initialize_is_idempotent(provider):
    await provider.initialize()


@pytest.mark.asyncio
async def test_initialize_creates_parent_directory(tmp_path):
    p = SQLiteSubmissionProvider(db_path=tmp_path / "nested" / "dir" / "packs.db")
    await p.initialize()
    assert (tmp_path / "nested" / "dir" / "packs.db").exists()


# ─── Create ───────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_round_trip(provider):
    created = await provider.create(_make_draft())

    assert created.id
    assert created.approval_status == ApprovalStatus.PENDING
    assert created.moderated_at is None

    fetched = await _find(provider, created.id)
    assert fetched == created


@pytest.mark.asyncio
async def test_create_assigns_unique_ids(provider):
    a = await provider.create(_make_draft())
    b = await provider.create(_make_draft())
    assert a.id != b.id


@pytest.mark.asyncio
async def test_optional_fields_stored_as_null(provider):
    created = await provider.create(
        _make_draft(tags=None, events=None, lifespan=None, location=None)
    )
    fetched = await _find(provider, created.id)
    assert fetched.tags is None
    assert fetched.events is None
    assert fetched.lifespan is None
    assert fetched.location is None


# ─── Listing ──────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_list_all_in_insertion_order(provider):
    ids = [(await provider.create(_make_draft(name=f"pack-{i}"))).id for i in range(3)]
    listed = await provider.list_all()
    assert [r.id for r in listed] == ids


@pytest.mark.asyncio
async def test_list_all_filtered_by_status(provider):
    first = await provider.create(_make_draft())
    await provider.create(_make_draft())
    await provider.update_status(first.id, ApprovalStatus.APPROVED)

    approved = await provider.list_all(ApprovalStatus.APPROVED)
    pending = await provider.list_all(ApprovalStatus.PENDING)

    assert [r.id for r in approved] == [first.id]
    assert len(pending) == 1


@pytest.mark.asyncio
async def test_list_by_owner(provider):
    mine = await provider.create(_make_draft(owner_id="u1"))
    await provider.create(_make_draft(owner_id="u2"))

    listed = await provider.list_by_owner("u1")
    assert [r.id for r in listed] == [mine.id]
    assert await provider.list_by_owner("nobody") == []


# ─── Status updates ───────────────────────────────────────────────

@pytest.mark.asyncio
async def test_update_status_returns_updated_record(provider):
    created = await provider.create(_make_draft())

    updated = await provider.update_status(created.id, ApprovalStatus.APPROVED)

    assert updated.approval_status == ApprovalStatus.APPROVED
    assert updated.moderated_at is not None
    assert (await _find(provider, created.id)).approval_status == ApprovalStatus.APPROVED


@pytest.mark.asyncio
async def test_update_status_missing_returns_none(provider):
    assert await provider.update_status("missing", ApprovalStatus.APPROVED) is None
    assert await provider.list_all() == []


@pytest.mark.asyncio
async def test_reapplying_status_keeps_moderated_at(provider):
    created = await provider.create(_make_draft())
    first = await provider.update_status(created.id, ApprovalStatus.REJECTED)
    again = await provider.update_status(created.id, ApprovalStatus.REJECTED)

    assert again.approval_status == ApprovalStatus.REJECTED
    assert again.moderated_at == first.moderated_at


@pytest.mark.asyncio
async def test_approve_then_reject(provider):
    created = await provider.create(_make_draft())
    await provider.update_status(created.id, ApprovalStatus.APPROVED)
    final = await provider.update_status(created.id, ApprovalStatus.REJECTED)
    assert final.approval_status == ApprovalStatus.REJECTED


@pytest.mark.asyncio
async def test_concurrent_transitions_last_writer_wins(provider):
    created = await provider.create(_make_draft())

    results = await asyncio.gather(
        provider.update_status(created.id, ApprovalStatus.APPROVED),
        provider.update_status(created.id, ApprovalStatus.REJECTED),
    )

    final = await _find(provider, created.id)
    assert all(r is not None for r in results)
    assert final.approval_status in (ApprovalStatus.APPROVED, ApprovalStatus.REJECTED)


# ─── Delete ───────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_delete_existing(provider):
    created = await provider.create(_make_draft())
    assert await provider.delete(created.id) is True
    assert await _find(provider, created.id) is None


@pytest.mark.asyncio
async def test_delete_missing(provider):
    assert await provider.delete("missing") is False


# ─── Failure translation ──────────────────────────────────────────

@pytest.mark.asyncio
async def test_unopenable_database_raises_storage_unavailable(tmp_path):
    # A directory cannot be opened as a database file.
    p = SQLiteSubmissionProvider(db_path=tmp_path)
    with pytest.raises(StorageUnavailableError) as exc_info:
        await p.list_all()
    assert exc_info.value.provider_name == "sqlite_submission"
