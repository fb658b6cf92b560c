"""Pure record → response-view mappings.

Two named projections, no side effects:

- :func:`project_public`: approve/reject responses and the public feed.
- :func:`project_full`  : owner and moderator listings.
"""

from __future__ import annotations

from stickerpacks.models.submission import SubmissionRecord
from stickerpacks.models.views import FullView, PublicView

DEFAULT_ASSET_BASE_URL = "/static/uploads/"


def asset_urls(record: SubmissionRecord, asset_base_url: str = DEFAULT_ASSET_BASE_URL) -> list[str]:
    """Join each asset ref onto the base URL with exactly one ``/``."""
    base = asset_base_url.rstrip("/")
    return [f"{base}/{ref.lstrip('/')}" for ref in record.asset_refs]


def project_public(
    record: SubmissionRecord, asset_base_url: str = DEFAULT_ASSET_BASE_URL
) -> PublicView:
    return PublicView(
        id=record.id,
        assets=asset_urls(record, asset_base_url),
        approval_status=record.approval_status,
        tags=record.tags,
        events=record.events,
        lifespan=record.lifespan,
    )


def project_full(
    record: SubmissionRecord, asset_base_url: str = DEFAULT_ASSET_BASE_URL
) -> FullView:
    return FullView(
        id=record.id,
        assets=asset_urls(record, asset_base_url),
        approval_status=record.approval_status,
        tags=record.tags,
        events=record.events,
        lifespan=record.lifespan,
        owner_id=record.owner_id,
        name=record.name,
        description=record.description,
        location=record.location,
        created_at=record.created_at,
    )
