"""Unit tests for the error hierarchy and API middleware.

Middleware is exercised on a bare FastAPI app so the tests don't depend
on the sticker pack routes.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from stickerpacks.api.middleware import (
    ErrorHandlingMiddleware,
    PrincipalMiddleware,
    RequestLoggingMiddleware,
    status_for,
)
from stickerpacks.api.session import COOKIE_NAME, create_session_cookie
from stickerpacks.utils.errors import (
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    StickerPackError,
    StorageUnavailableError,
    ValidationError,
    ValidationReason,
)

SECRET = "middleware-secret"


def _make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(PrincipalMiddleware, secret=SECRET, ttl_hours=1)

    @app.get("/whoami")
    async def whoami(request: Request) -> dict:
        caller = request.state.caller
        return {"role": caller.role, "user_id": caller.user_id}

    @app.get("/validation")
    async def validation() -> dict:
        raise ValidationError(ValidationReason.MISSING_ASSET)

    @app.get("/not-found")
    async def not_found() -> dict:
        raise NotFoundError("stickerpack", "abc")

    @app.get("/auth")
    async def auth() -> dict:
        raise AuthenticationError()

    return app


@pytest.fixture
def client():
    with TestClient(_make_app()) as c:
        yield c


# ─── Error hierarchy ──────────────────────────────────────────────

class TestErrors:
    def test_provider_prefix_in_str(self):
        exc = StorageUnavailableError("database is locked", provider_name="sqlite_submission")
        assert str(exc) == "[sqlite_submission] database is locked"
        assert exc.message == "database is locked"

    def test_str_without_provider(self):
        assert str(StickerPackError("plain")) == "plain"

    def test_validation_default_message(self):
        exc = ValidationError(ValidationReason.MISSING_OWNER)
        assert exc.reason == ValidationReason.MISSING_OWNER
        assert exc.message == "Submission has no owner"

    def test_credentials_reason_is_not_metadata(self):
        exc = ValidationError(ValidationReason.MISSING_CREDENTIALS)
        assert exc.reason.value == "missing_credentials"
        assert exc.message == "Username and password are required"

    def test_not_found_message(self):
        assert NotFoundError("user", "u9").message == "user 'u9' not found"
        assert NotFoundError().message == "stickerpack not found"

    @pytest.mark.parametrize("exc_class", [
        NotFoundError,
        StorageUnavailableError,
        AuthenticationError,
        ConfigurationError,
    ])
    def test_all_derive_from_base(self, exc_class):
        assert issubclass(exc_class, StickerPackError)

    def test_status_mapping(self):
        assert status_for(AuthenticationError()) == 401
        assert status_for(NotFoundError()) == 500
        assert status_for(ValidationError(ValidationReason.MISSING_ASSET)) == 500


# ─── Middleware ───────────────────────────────────────────────────

class TestErrorHandlingMiddleware:
    def test_validation_error_body(self, client):
        response = client.get("/validation")
        assert response.status_code == 500
        assert response.json() == {
            "error": "ValidationError",
            "detail": "At least one sticker file is required",
            "reason": "missing_asset",
        }

    def test_not_found_body(self, client):
        response = client.get("/not-found")
        assert response.status_code == 500
        assert response.json()["error"] == "NotFoundError"
        assert response.json()["reason"] is None

    def test_authentication_error_is_401(self, client):
        response = client.get("/auth")
        assert response.status_code == 401
        assert response.json()["error"] == "AuthenticationError"


class TestPrincipalMiddleware:
    def test_anonymous_without_cookie(self, client):
        assert client.get("/whoami").json() == {"role": None, "user_id": None}

    def test_valid_cookie_resolves_caller(self, client):
        client.cookies.set(COOKIE_NAME, create_session_cookie(SECRET, "u1", "moderator"))
        assert client.get("/whoami").json() == {"role": "moderator", "user_id": "u1"}

    def test_forged_cookie_is_anonymous(self, client):
        client.cookies.set(COOKIE_NAME, create_session_cookie("wrong", "u1", "moderator"))
        assert client.get("/whoami").json() == {"role": None, "user_id": None}
