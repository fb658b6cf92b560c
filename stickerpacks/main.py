"""Sticker pack service FastAPI application entry point.

Builds the :class:`~stickerpacks.context.ServiceContext` from ``.env`` and
``config/config.yaml``, configures structured logging, wires middleware and
routers, and serves the ``public/`` directory (including uploaded stickers)
under ``/static``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from stickerpacks.api.auth_routes import auth_router
from stickerpacks.api.middleware import (
    ErrorHandlingMiddleware,
    PrincipalMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from stickerpacks.api.routes import router as stickerpack_router
from stickerpacks.config.settings import Settings
from stickerpacks.context import ServiceContext, build_context
from stickerpacks.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Create schemas and the upload directory before serving requests."""
    context: ServiceContext = application.state.context
    await context.initialize()

    _logger.info(
        "app_startup",
        version="0.1.0",
        environment=context.settings.app_env,
        submission_store=context.submission_store.get_provider_name(),
        blob_store=context.blob_store.get_provider_name(),
        user_store=context.user_store.get_provider_name(),
    )

    yield

    _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(context: ServiceContext | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    Args:
        context: Pre-built service context.  Built from the module-level
            settings when omitted; tests pass one pointing at temp paths.
    """
    if context is None:
        context = build_context(settings)

    application = FastAPI(
        title="Sticker Pack API",
        version="0.1.0",
        description=(
            "Upload sticker packs with descriptive metadata, review them "
            "through a pending / approved / rejected workflow, and serve the "
            "approved catalogue."
        ),
        lifespan=_lifespan,
    )
    application.state.context = context

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(
        PrincipalMiddleware,
        secret=context.session_secret,
        ttl_hours=context.settings.session_ttl_hours,
    )
    configure_cors(application, allowed_origins=context.settings.cors_allowed_origins)

    # -- API routes --
    application.include_router(stickerpack_router)
    application.include_router(auth_router)

    # -- Static files (frontend pages and uploaded stickers) --
    application.mount(
        "/static",
        StaticFiles(directory=context.settings.public_dir, check_dir=False),
        name="static",
    )

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "stickerpacks.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
