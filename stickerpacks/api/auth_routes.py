"""Login, logout and session routes.

# ─── ROUTE ARCHITECTURE ─────────────────────────────────────────────
#
# The login form posts credentials as ``application/x-www-form-urlencoded``
# and the browser follows a 303 redirect either way, so the static pages
# under /static never need JavaScript to handle the response.
#
# Endpoints:
#   POST /login    : verify credentials, set the session cookie, redirect
#   POST /logout   : clear the session cookie, redirect to the login page
#   GET  /session  : JSON description of the current caller
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Form
from fastapi.responses import RedirectResponse

from stickerpacks.api.dependencies import CallerDep, ContextDep
from stickerpacks.api.schemas import SessionResponse
from stickerpacks.api.session import COOKIE_NAME, create_session_cookie

auth_router = APIRouter(tags=["auth"])


@auth_router.post("/login")
async def login(
    context: ContextDep,
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> RedirectResponse:
    """Verify credentials and redirect with a signed session cookie."""
    principal = await context.auth.authenticate(username, password)
    if principal is None:
        return RedirectResponse(url=context.login_failure_url, status_code=303)

    settings = context.settings
    cookie_value = create_session_cookie(context.session_secret, principal.id, principal.role)

    response = RedirectResponse(url=context.login_success_url, status_code=303)
    response.set_cookie(
        key=COOKIE_NAME,
        value=cookie_value,
        httponly=True,
        samesite="strict",
        secure=settings.app_env == "production",
        max_age=settings.session_ttl_hours * 3600,
        path="/",
    )
    return response


@auth_router.post("/logout")
async def logout(context: ContextDep) -> RedirectResponse:
    """Clear the session cookie."""
    response = RedirectResponse(url=context.login_failure_url, status_code=303)
    response.delete_cookie(key=COOKIE_NAME, path="/")
    return response


@auth_router.get("/session", response_model=SessionResponse, response_model_by_alias=True)
async def session_status(context: ContextDep, caller: CallerDep) -> SessionResponse:
    """Return the caller resolved from the session cookie."""
    if caller.user_id is None:
        return SessionResponse(authenticated=False)

    principal = await context.auth.get_user(caller.user_id)
    if principal is None:
        # Cookie outlived its user.
        return SessionResponse(authenticated=False)

    return SessionResponse(
        authenticated=True,
        user_id=principal.id,
        role=principal.role,
        display_name=principal.display_name or principal.username,
    )
