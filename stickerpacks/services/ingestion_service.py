"""Sticker pack ingestion: validate, normalize, store.

# ─── ARCHITECTURE ────────────────────────────────────────────────────
#
# IngestionService turns one multipart upload (files + metadata map +
# owner id) into a persisted SubmissionRecord:
#
#   1. validate   → ValidationError before ANY blob or store write
#   2. normalize  → normalize_metadata() (pure)
#   3. blobs      → one IBlobProvider.put() per file, in upload order
#   4. record     → one ISubmissionProvider.create(), status pending
#
# There is no transaction spanning blob and record writes.  If step 4
# fails after step 3, the written blobs are orphaned; that gap is known.
#
# Dependencies (all injected): ISubmissionProvider, IBlobProvider.
# Layer: Services (depends on Interfaces, used by API routes)
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable, Mapping, Sequence
from pathlib import PurePosixPath
from typing import Any

import structlog

from stickerpacks.interfaces.blob_provider import IBlobProvider
from stickerpacks.interfaces.submission_provider import ISubmissionProvider
from stickerpacks.models.submission import SubmissionDraft, SubmissionRecord, UploadedAsset
from stickerpacks.utils.errors import ValidationError, ValidationReason

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_MAX_ASSETS = 12
DEFAULT_MAX_ASSET_BYTES = 10 * 1024 * 1024

_WHITESPACE_RE = re.compile(r"\s+")


# ─── Pure helpers ────────────────────────────────────────────────────


def split_delimited(value: Any, *, unique: bool = False) -> list[str] | None:
    """Normalize a comma-delimited field into a list of short strings.

    Strings have all whitespace removed and are split on ``,``.  Lists
    have each entry cleaned the same way.  Empty entries are dropped and
    an empty result is ``None``, never ``[""]``.

    Raises ValidationError(MALFORMED_METADATA) for any other type.
    """
    if value is None:
        return None
    if isinstance(value, str):
        parts = _WHITESPACE_RE.sub("", value).split(",")
    elif isinstance(value, (list, tuple)):
        parts = [_WHITESPACE_RE.sub("", str(item)) for item in value if item is not None]
    else:
        raise ValidationError(
            ValidationReason.MALFORMED_METADATA,
            message=f"Expected a comma-separated string or list, got {type(value).__name__}",
        )

    items = [p for p in parts if p]
    if unique:
        items = list(dict.fromkeys(items))
    return items or None


def normalize_metadata(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Derive the canonical record fields from a raw metadata map.

    ``description`` falls back to the legacy ``desc`` key.  ``lifespan``
    and ``location`` are passed through unvalidated when present.
    """
    fields: dict[str, Any] = {
        "name": str(metadata.get("name") or ""),
        "description": str(metadata.get("description") or metadata.get("desc") or ""),
        "tags": split_delimited(metadata.get("tags"), unique=True),
        "events": split_delimited(metadata.get("events")),
        "lifespan": None,
        "location": None,
    }
    if metadata.get("lifespan"):
        fields["lifespan"] = metadata["lifespan"]
    if metadata.get("location"):
        fields["location"] = metadata["location"]
    return fields


def generate_asset_key(filename: str, timestamp: float) -> str:
    """Build a blob key from a timestamp (seconds) and the file's extension.

    The extension is everything from the first ``.`` of the base name, so
    ``cat.tar.gz`` keeps ``.tar.gz``.  Any client-supplied directory part
    is discarded.
    """
    base = PurePosixPath(filename.replace("\\", "/")).name
    dot = base.find(".")
    extension = base[dot:] if dot != -1 else ""
    return f"{int(timestamp * 1000)}{extension}"


# ─── Service ─────────────────────────────────────────────────────────


class IngestionService:
    """Validates and persists new sticker pack submissions."""

    def __init__(
        self,
        *,
        submission_store: ISubmissionProvider,
        blob_store: IBlobProvider,
        max_assets: int = DEFAULT_MAX_ASSETS,
        max_asset_bytes: int = DEFAULT_MAX_ASSET_BYTES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = submission_store
        self._blobs = blob_store
        self._max_assets = max_assets
        self._max_asset_bytes = max_asset_bytes
        self._clock = clock

    @property
    def max_assets(self) -> int:
        return self._max_assets

    @property
    def max_asset_bytes(self) -> int:
        return self._max_asset_bytes

    async def ingest(
        self,
        files: Sequence[UploadedAsset],
        metadata: Mapping[str, Any],
        owner_id: Any,
    ) -> SubmissionRecord:
        """Validate a submission, write its assets and create the record.

        Parameters
        ----------
        files:
            Uploaded files in client order.  At least one is required.
        metadata:
            Free-form metadata map (already JSON-decoded).
        owner_id:
            Identifier of the submitting principal.

        Returns
        -------
        SubmissionRecord
            The new record, always with status ``pending``.
        """
        owner = self._validate(files, metadata, owner_id)
        fields = normalize_metadata(metadata)

        asset_refs: list[str] = []
        for asset in files:
            key = generate_asset_key(asset.filename, self._clock())
            asset_refs.append(await self._blobs.put(key, asset.data))

        draft = SubmissionDraft(owner_id=owner, asset_refs=asset_refs, **fields)
        record = await self._store.create(draft)

        logger.info(
            "submission_ingested",
            record_id=record.id,
            owner_id=record.owner_id,
            asset_count=len(record.asset_refs),
        )
        return record

    def check_envelope(
        self,
        file_count: int,
        metadata: Mapping[str, Any],
        owner_id: Any,
    ) -> str:
        """Run the checks that need no file contents.  Returns the cleaned owner id.

        The API calls this before reading upload bodies so an oversized
        batch is refused without buffering it.
        """
        if file_count == 0:
            raise ValidationError(ValidationReason.MISSING_ASSET)

        owner = "" if owner_id is None else str(owner_id).strip()
        if not owner:
            raise ValidationError(ValidationReason.MISSING_OWNER)

        if not isinstance(metadata, Mapping):
            raise ValidationError(
                ValidationReason.MALFORMED_METADATA,
                message="Submission metadata must be a JSON object",
            )

        if file_count > self._max_assets:
            raise ValidationError(
                ValidationReason.TOO_MANY_ASSETS,
                message=f"At most {self._max_assets} sticker files per submission",
            )
        return owner

    def _validate(
        self,
        files: Sequence[UploadedAsset],
        metadata: Mapping[str, Any],
        owner_id: Any,
    ) -> str:
        """Run every pre-write check.  Returns the cleaned owner id."""
        owner = self.check_envelope(len(files), metadata, owner_id)

        for asset in files:
            if asset.size > self._max_asset_bytes:
                raise ValidationError(
                    ValidationReason.ASSET_TOO_LARGE,
                    message=f"'{asset.filename}' exceeds {self._max_asset_bytes} bytes",
                )

        # Surface malformed tags/events before blobs are written.
        split_delimited(metadata.get("tags"))
        split_delimited(metadata.get("events"))
        return owner
