"""Response views produced by the projection functions.

Two named shapes replace the ad hoc dicts of older API generations:

- ``PublicView`` : what any consumer may see: status, asset URLs, tags,
  events and lifespan.  No name, description, owner or location.
- ``FullView``   : the owner / moderator shape: everything in the public
  view plus ``ownerId``, ``name``, ``description``, ``location`` and
  ``createdAt``.

Fields serialize with camelCase aliases (``approvalStatus``, ``ownerId``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from stickerpacks.models.submission import ApprovalStatus


class PublicView(BaseModel):
    """Public projection of a submission."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    assets: list[str]
    approval_status: ApprovalStatus
    tags: list[str] | None = None
    events: list[str] | None = None
    lifespan: Any = None


class FullView(PublicView):
    """Owner / moderator projection of a submission."""

    owner_id: str
    name: str = ""
    description: str = ""
    location: Any = None
    created_at: str
