"""Request and response schemas for the HTTP API.

Submission views (``FullView`` / ``PublicView``) live in
``stickerpacks.models.views`` because the projection layer builds them;
this module holds the API-only shapes.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from stickerpacks.models.user import UserRole


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
    reason: str | None = None


class SessionResponse(BaseModel):
    """Current session state for the caller."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    authenticated: bool
    user_id: str | None = None
    role: UserRole | None = None
    display_name: str | None = None
