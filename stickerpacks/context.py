"""Explicit service context: the composition root's output.

Every store, blob and service handle the application needs lives on one
``ServiceContext``.  ``build_context`` constructs it once per application
(no I/O happens here); ``ServiceContext.initialize`` runs the async schema
and directory setup from the FastAPI lifespan.  Route handlers reach it
through ``request.app.state.context``; nothing is a module-level singleton.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from stickerpacks.config.loader import load_config
from stickerpacks.config.settings import Settings
from stickerpacks.interfaces.blob_provider import IBlobProvider
from stickerpacks.interfaces.submission_provider import ISubmissionProvider
from stickerpacks.interfaces.user_provider import IUserProvider
from stickerpacks.providers.blob.local_blob_provider import LocalBlobProvider
from stickerpacks.providers.submission.sqlite_submission_provider import SQLiteSubmissionProvider
from stickerpacks.providers.user.sqlite_user_provider import SQLiteUserProvider
from stickerpacks.services.auth_service import DEFAULT_BCRYPT_ROUNDS, AuthService
from stickerpacks.services.ingestion_service import (
    DEFAULT_MAX_ASSET_BYTES,
    DEFAULT_MAX_ASSETS,
    IngestionService,
)
from stickerpacks.services.moderation_service import ModerationService
from stickerpacks.services.projection import DEFAULT_ASSET_BASE_URL
from stickerpacks.services.query_service import ModeratorView, QueryService, parse_moderator_view

logger = structlog.get_logger(logger_name=__name__)

UPLOADS_SUBDIR = "uploads"


@dataclass(frozen=True)
class ServiceContext:
    """All collaborators for one running application."""

    settings: Settings
    submission_store: ISubmissionProvider
    blob_store: IBlobProvider
    user_store: IUserProvider
    ingestion: IngestionService
    moderation: ModerationService
    query: QueryService
    auth: AuthService
    session_secret: str
    asset_base_url: str = DEFAULT_ASSET_BASE_URL
    trust_query_principal: bool = True
    require_moderator: bool = False
    login_success_url: str = "/static/index.html"
    login_failure_url: str = "/static/login.html"

    async def initialize(self) -> None:
        """Create schemas and directories for every provider (idempotent)."""
        await self.submission_store.initialize()
        await self.user_store.initialize()
        await self.blob_store.initialize()


def build_context(settings: Settings, config: dict[str, Any] | None = None) -> ServiceContext:
    """Construct the full dependency graph.

    Parameters
    ----------
    settings:
        Deployment settings (paths, secret, env).
    config:
        Policy dict as returned by :func:`load_config`.  Loaded from
        ``settings.config_path`` when omitted.
    """
    if config is None:
        config = load_config(settings=settings)

    uploads = config.get("uploads") or {}
    review = config.get("review") or {}
    assets = config.get("assets") or {}
    auth = config.get("auth") or {}

    submission_store = SQLiteSubmissionProvider(db_path=settings.submissions_db_path)
    user_store = SQLiteUserProvider(db_path=settings.users_db_path)
    blob_store = LocalBlobProvider(root_dir=Path(settings.public_dir) / UPLOADS_SUBDIR)

    moderator_view = parse_moderator_view(review.get("moderator_view", ModeratorView.ALL.value))

    session_secret = settings.session_secret
    if not session_secret:
        session_secret = secrets.token_urlsafe(32)
        logger.warning(
            "session_secret_generated",
            message="SESSION_SECRET is empty; sessions will not survive a restart",
        )

    context = ServiceContext(
        settings=settings,
        submission_store=submission_store,
        blob_store=blob_store,
        user_store=user_store,
        ingestion=IngestionService(
            submission_store=submission_store,
            blob_store=blob_store,
            max_assets=int(uploads.get("max_assets", DEFAULT_MAX_ASSETS)),
            max_asset_bytes=int(uploads.get("max_asset_bytes", DEFAULT_MAX_ASSET_BYTES)),
        ),
        moderation=ModerationService(submission_store=submission_store),
        query=QueryService(submission_store=submission_store, moderator_view=moderator_view),
        auth=AuthService(
            user_store=user_store,
            rounds=int(auth.get("bcrypt_rounds", DEFAULT_BCRYPT_ROUNDS)),
        ),
        session_secret=session_secret,
        asset_base_url=str(assets.get("base_url", DEFAULT_ASSET_BASE_URL)),
        trust_query_principal=bool(review.get("trust_query_principal", True)),
        require_moderator=bool(review.get("require_moderator", False)),
        login_success_url=str(auth.get("login_success_url", "/static/index.html")),
        login_failure_url=str(auth.get("login_failure_url", "/static/login.html")),
    )

    logger.info(
        "service_context_built",
        submissions_db=settings.submissions_db_path,
        users_db=settings.users_db_path,
        moderator_view=moderator_view.value,
        max_assets=context.ingestion.max_assets,
    )
    return context
