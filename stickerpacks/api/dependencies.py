"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from stickerpacks.context import ServiceContext
from stickerpacks.models.user import Caller
from stickerpacks.utils.errors import AuthenticationError


def get_context(request: Request) -> ServiceContext:
    """Retrieve the ServiceContext from app state; raise 503 if unavailable."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(status_code=503, detail="Service context unavailable")
    return context


def get_caller(request: Request) -> Caller:
    """Return the caller resolved by PrincipalMiddleware (anonymous if none)."""
    return getattr(request.state, "caller", None) or Caller()


def require_reviewer(
    context: Annotated[ServiceContext, Depends(get_context)],
    caller: Annotated[Caller, Depends(get_caller)],
) -> Caller:
    """Gate moderation routes when ``review.require_moderator`` is enabled."""
    if context.require_moderator and not caller.is_moderator:
        raise AuthenticationError("Moderator session required")
    return caller


ContextDep = Annotated[ServiceContext, Depends(get_context)]
CallerDep = Annotated[Caller, Depends(get_caller)]
ReviewerDep = Annotated[Caller, Depends(require_reviewer)]
