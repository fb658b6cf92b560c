"""API middleware: CORS, caller resolution, request logging, error handling.

# ─── MIDDLEWARE EXECUTION ORDER ───────────────────────────────────────
#
# Starlette middleware is a stack (last added = outermost).  main.py adds:
#
#     ErrorHandlingMiddleware     (1st → innermost)
#     RequestLoggingMiddleware    (2nd)
#     PrincipalMiddleware         (3rd)
#     CORS                        (4th → outermost)
#
#   Request flow:
#     Client → CORS → Principal → RequestLogging → ErrorHandling → route
#
# PrincipalMiddleware binds user_id / role into structlog contextvars
# before RequestLogging runs, so the ``http_request`` event carries them.
# RequestLogging sees the final status even when ErrorHandling replaced
# an exception with a structured JSON error.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from stickerpacks.api.schemas import ErrorResponse
from stickerpacks.api.session import COOKIE_NAME, read_session_cookie
from stickerpacks.models.user import Caller
from stickerpacks.utils.errors import AuthenticationError, StickerPackError, ValidationError
from stickerpacks.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Explicit list of allowed origins.  Defaults to ``["*"]``.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Caller resolution
# ---------------------------------------------------------------------------


class PrincipalMiddleware(BaseHTTPMiddleware):
    """Resolve the session cookie into ``request.state.caller``.

    Never rejects a request: an absent or invalid cookie yields an
    anonymous ``Caller()``.  Routes decide what an anonymous caller may do.
    """

    def __init__(self, app: object, secret: str, ttl_hours: int = 168) -> None:
        super().__init__(app)
        self._secret = secret
        self._ttl_hours = ttl_hours

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        cookie = request.cookies.get(COOKIE_NAME, "")
        caller = read_session_cookie(cookie, self._secret, self._ttl_hours) or Caller()
        request.state.caller = caller

        with structlog.contextvars.bound_contextvars(
            user_id=caller.user_id,
            role=caller.role.value if caller.role else None,
        ):
            return await call_next(request)


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=response.status_code if response else 500,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


def status_for(exc: StickerPackError) -> int:
    """HTTP status for an application error: 401 for auth, 500 otherwise."""
    if isinstance(exc, AuthenticationError):
        return 401
    return 500


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch ``StickerPackError`` subclasses and return structured JSON errors.

    The client receives the error class name, its message and (for
    validation failures) the reason code.  Details stay in the logs.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except StickerPackError as exc:
            reason = exc.reason.value if isinstance(exc, ValidationError) else None
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                reason=reason,
                provider=exc.provider_name,
                path=str(request.url.path),
            )
            body = ErrorResponse(
                error=type(exc).__name__,
                detail=exc.message,
                reason=reason,
            )
            return JSONResponse(
                status_code=status_for(exc),
                content=body.model_dump(),
            )
