"""End-to-end submission flow: ingest → moderate → list.

Drives the services directly against real SQLite and filesystem adapters,
then repeats the core scenario over HTTP.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from stickerpacks.models.submission import ApprovalStatus, UploadedAsset
from stickerpacks.models.user import UserRole
from stickerpacks.utils.errors import NotFoundError, ValidationError
from tests.conftest import register_user

ASSET_KEY_RE = re.compile(r"^\d{13}\.png$")


@pytest.fixture
async def context(app_context):
    await app_context.initialize()
    return app_context


def _cat() -> UploadedAsset:
    return UploadedAsset(filename="cat.png", content_type="image/png", data=b"meow")


class TestServiceFlow:
    @pytest.mark.asyncio
    async def test_cat_scenario(self, context):
        record = await context.ingestion.ingest([_cat()], {"name": "Cats", "authorId": "u1"}, "u1")

        assert len(record.asset_refs) == 1
        assert ASSET_KEY_RE.match(record.asset_refs[0])
        assert record.approval_status == ApprovalStatus.PENDING
        assert (context.blob_store.root_dir / record.asset_refs[0]).read_bytes() == b"meow"

        approved = await context.moderation.approve(record.id)
        assert approved.approval_status == ApprovalStatus.APPROVED

        moderator_ids = [r.id for r in await context.query.list(UserRole.MODERATOR)]
        assert record.id in moderator_ids

        other_ids = [r.id for r in await context.query.list(UserRole.SUBMITTER, "u2")]
        assert record.id not in other_ids

    @pytest.mark.asyncio
    async def test_same_millisecond_uploads_do_not_overwrite(self, context):
        record = await context.ingestion.ingest(
            [_cat(), UploadedAsset(filename="cat.png", data=b"purr")], {}, "u1"
        )

        assert len(set(record.asset_refs)) == 2
        contents = {(context.blob_store.root_dir / ref).read_bytes() for ref in record.asset_refs}
        assert contents == {b"meow", b"purr"}

    @pytest.mark.asyncio
    async def test_failed_validation_writes_nothing(self, context):
        with pytest.raises(ValidationError):
            await context.ingestion.ingest([], {"name": "empty"}, "u1")

        assert await context.submission_store.list_all() == []
        assert list(context.blob_store.root_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_transition_on_missing_id_mutates_nothing(self, context):
        record = await context.ingestion.ingest([_cat()], {}, "u1")

        with pytest.raises(NotFoundError):
            await context.moderation.reject("missing")

        [stored] = await context.submission_store.list_all()
        assert stored.id == record.id
        assert stored.approval_status == ApprovalStatus.PENDING

    @pytest.mark.asyncio
    async def test_submitter_listing_is_exactly_owned(self, context):
        mine = [await context.ingestion.ingest([_cat()], {}, "u1") for _ in range(2)]
        await context.ingestion.ingest([_cat()], {}, "u2")

        listed = await context.query.list(UserRole.SUBMITTER, "u1")
        assert [r.id for r in listed] == [r.id for r in mine]


class TestHttpFlow:
    def test_cat_scenario_over_http(self, client, app_context):
        u1 = register_user(app_context, "u1")
        u2 = register_user(app_context, "u2")

        response = client.post(
            "/stickerpacks",
            files=[("sticker-pack", ("cat.png", b"meow", "image/png"))],
            data={"metadata": json.dumps({"name": "Cats", "authorId": u1.id})},
        )
        assert response.status_code == 200

        own = client.get("/stickerpacks", params={"authorId": u1.id}).json()
        assert len(own) == 1
        pack = own[0]
        assert pack["approvalStatus"] == "pending"
        assert ASSET_KEY_RE.match(Path(pack["assets"][0]).name)

        approved = client.post(f"/stickerpacks/approve/{pack['id']}").json()
        assert approved["approvalStatus"] == "approved"

        moderator = client.get("/stickerpacks", params={"isApprover": "true"}).json()
        assert pack["id"] in [p["id"] for p in moderator]

        other = client.get("/stickerpacks", params={"authorId": u2.id}).json()
        assert pack["id"] not in [p["id"] for p in other]

        public = client.get("/stickerpacks/public").json()
        assert [p["id"] for p in public] == [pack["id"]]
