"""REST API routes for sticker pack submissions.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: API (FastAPI route handlers).
# Pattern: thin handlers.  Each one pulls the ServiceContext from
#          ``request.app.state`` via ``ContextDep``, delegates to one
#          service call and projects the result.  Application errors
#          propagate to ErrorHandlingMiddleware (500 + ErrorResponse).
#
# Endpoints (literal routes before parameterised ones):
#   POST   /stickerpacks              : Submit (multipart: sticker-pack, metadata)
#   GET    /stickerpacks              : List for the caller (full view)
#   GET    /stickerpacks/public       : Approved feed (public view)
#   POST   /stickerpacks/approve/{id} : Approve (public view)
#   POST   /stickerpacks/reject/{id}  : Reject (public view)
#   DELETE /stickerpacks/{id}         : Hard delete
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
from typing import Annotated, Any

from fastapi import APIRouter, File, Form, Query, Response, UploadFile

from stickerpacks.api.dependencies import CallerDep, ContextDep, ReviewerDep
from stickerpacks.context import ServiceContext
from stickerpacks.models.submission import UploadedAsset
from stickerpacks.models.user import Caller, UserRole
from stickerpacks.models.views import FullView, PublicView
from stickerpacks.services.projection import project_full, project_public
from stickerpacks.utils.errors import NotFoundError, ValidationError, ValidationReason

router = APIRouter(prefix="/stickerpacks", tags=["stickerpacks"])

UPLOAD_FIELD = "sticker-pack"
_UPLOAD_CHUNK_SIZE = 64 * 1024


# ── Helpers ───────────────────────────────────────────────────────────


def _parse_metadata(raw: str | None) -> dict[str, Any]:
    """Decode the JSON ``metadata`` form field into a dict."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(
            ValidationReason.MALFORMED_METADATA,
            message="metadata is not valid JSON",
        ) from exc
    if not isinstance(data, dict):
        raise ValidationError(
            ValidationReason.MALFORMED_METADATA,
            message="metadata must be a JSON object",
        )
    return data


async def _read_upload(upload: UploadFile, limit: int) -> UploadedAsset:
    """Read one file in chunks, stopping as soon as it passes ``limit`` bytes."""
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = await upload.read(_UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > limit:
            raise ValidationError(
                ValidationReason.ASSET_TOO_LARGE,
                message=f"'{upload.filename}' exceeds {limit} bytes",
            )
        chunks.append(chunk)
    return UploadedAsset(
        filename=upload.filename or "",
        content_type=upload.content_type,
        data=b"".join(chunks),
    )


async def _resolve_list_caller(
    context: ServiceContext,
    caller: Caller,
    author_id: str | None,
    is_approver: str | None,
) -> Caller:
    """Pick the listing identity: session first, then legacy query params.

    ``isApprover`` is a plain presence flag: any non-empty value, even
    ``false``, selects the moderator listing.
    """
    if caller.role is not None:
        return caller
    if not context.trust_query_principal:
        return caller

    if author_id:
        if await context.auth.get_user(author_id) is None:
            raise NotFoundError("user", author_id)
        return Caller(role=UserRole.SUBMITTER, user_id=author_id)
    if is_approver:
        return Caller(role=UserRole.MODERATOR)
    return caller


# ── Submit ────────────────────────────────────────────────────────────
@router.post("")
async def submit_stickerpack(
    context: ContextDep,
    caller: CallerDep,
    files: Annotated[list[UploadFile] | None, File(alias=UPLOAD_FIELD)] = None,
    metadata: Annotated[str | None, Form()] = None,
) -> Response:
    """Upload one or more sticker files with JSON metadata."""
    meta = _parse_metadata(metadata)
    uploads = files or []
    owner_id = caller.user_id or meta.get("authorId")

    ingestion = context.ingestion
    ingestion.check_envelope(len(uploads), meta, owner_id)
    assets = [await _read_upload(u, ingestion.max_asset_bytes) for u in uploads]

    await ingestion.ingest(assets, meta, owner_id)
    return Response(status_code=200)


# ── List ──────────────────────────────────────────────────────────────
@router.get("", response_model=list[FullView], response_model_exclude_none=True)
async def list_stickerpacks(
    context: ContextDep,
    caller: CallerDep,
    author_id: Annotated[str | None, Query(alias="authorId")] = None,
    is_approver: Annotated[str | None, Query(alias="isApprover")] = None,
) -> list[FullView]:
    """List the packs the caller may see, in submission order."""
    effective = await _resolve_list_caller(context, caller, author_id, is_approver)
    records = await context.query.list(effective.role, effective.user_id)
    return [project_full(r, context.asset_base_url) for r in records]


@router.get("/public", response_model=list[PublicView], response_model_exclude_none=True)
async def list_public_stickerpacks(context: ContextDep) -> list[PublicView]:
    """List approved packs for ordinary consumers."""
    records = await context.query.list_public()
    return [project_public(r, context.asset_base_url) for r in records]


# ── Moderation ────────────────────────────────────────────────────────
@router.post(
    "/approve/{record_id}",
    response_model=PublicView,
    response_model_exclude_none=True,
)
async def approve_stickerpack(
    record_id: str, context: ContextDep, reviewer: ReviewerDep
) -> PublicView:
    record = await context.moderation.approve(record_id)
    return project_public(record, context.asset_base_url)


@router.post(
    "/reject/{record_id}",
    response_model=PublicView,
    response_model_exclude_none=True,
)
async def reject_stickerpack(
    record_id: str, context: ContextDep, reviewer: ReviewerDep
) -> PublicView:
    record = await context.moderation.reject(record_id)
    return project_public(record, context.asset_base_url)


@router.delete("/{record_id}")
async def delete_stickerpack(
    record_id: str, context: ContextDep, reviewer: ReviewerDep
) -> Response:
    """Hard-delete a pack.  Uploaded files are kept."""
    await context.moderation.delete(record_id)
    return Response(status_code=200)
