"""Sticker pack submission domain models.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph: no imports from upper layers).
#
#   - ``ApprovalStatus``   : the tri-state moderation lifecycle.
#   - ``UploadedAsset``    : one file from a multipart upload, already read.
#   - ``SubmissionDraft``  : the normalized ingestion output handed to the
#                             store.  It has no id and no status: the store
#                             assigns the id and always creates ``pending``.
#   - ``SubmissionRecord`` : the persisted entity returned by the store.
#
# All models are frozen.  Only the moderation service changes
# ``approval_status`` and it does so at the store, never in memory.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApprovalStatus(str, Enum):
    """Lifecycle states for a submitted sticker pack."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UploadedAsset(BaseModel):
    """A single uploaded file, read into memory at the API boundary."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(default="", description="Client-supplied original filename.")
    content_type: str | None = Field(default=None)
    data: bytes = Field(default=b"", repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


class SubmissionDraft(BaseModel):
    """Normalized submission, ready to be written by the store."""

    model_config = ConfigDict(frozen=True)

    owner_id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    asset_refs: list[str] = Field(min_length=1, description="Blob keys, in upload order.")
    tags: list[str] | None = None
    events: list[str] | None = None
    # Passed through verbatim; expected {start, end} / {lat, long} but not enforced.
    lifespan: Any = None
    location: Any = None


class SubmissionRecord(BaseModel):
    """A persisted sticker pack submission."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque identifier assigned by the store.")
    owner_id: str
    name: str = ""
    description: str = ""
    asset_refs: list[str] = Field(min_length=1)
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    tags: list[str] | None = None
    events: list[str] | None = None
    lifespan: Any = None
    location: Any = None
    created_at: str = Field(description="ISO-8601 UTC creation time.")
    moderated_at: str | None = Field(
        default=None,
        description="ISO-8601 UTC time of the last status change, if any.",
    )
