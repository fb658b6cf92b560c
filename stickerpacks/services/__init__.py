"""Service layer: ingestion, moderation, listing, projection and auth."""

from stickerpacks.services.auth_service import AuthService
from stickerpacks.services.ingestion_service import IngestionService
from stickerpacks.services.moderation_service import ModerationService
from stickerpacks.services.projection import project_full, project_public
from stickerpacks.services.query_service import ModeratorView, QueryService

__all__ = [
    "AuthService",
    "IngestionService",
    "ModerationService",
    "ModeratorView",
    "QueryService",
    "project_full",
    "project_public",
]
