"""Domain models: re-exports the public model classes."""

from stickerpacks.models.submission import (
    ApprovalStatus,
    SubmissionDraft,
    SubmissionRecord,
    UploadedAsset,
)
from stickerpacks.models.user import Caller, UserPrincipal, UserRole
from stickerpacks.models.views import FullView, PublicView

__all__ = [
    "ApprovalStatus",
    "Caller",
    "FullView",
    "PublicView",
    "SubmissionDraft",
    "SubmissionRecord",
    "UploadedAsset",
    "UserPrincipal",
    "UserRole",
]
