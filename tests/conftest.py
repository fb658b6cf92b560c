"""Shared pytest fixtures for the sticker pack test suite."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from stickerpacks.config.settings import Settings
from stickerpacks.models.submission import ApprovalStatus, SubmissionRecord, UploadedAsset

# Lowest bcrypt cost passlib accepts; production uses config/config.yaml.
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing every path at a per-test temp directory."""
    return Settings(
        submissions_db_path=str(tmp_path / "data" / "stickerpacks.db"),
        users_db_path=str(tmp_path / "data" / "users.db"),
        public_dir=str(tmp_path / "public"),
        session_secret="test-session-secret",
        config_path=str(tmp_path / "absent.yaml"),
        app_env="development",
    )


@pytest.fixture
def policy_config() -> dict[str, Any]:
    """Policy dict equivalent to config/config.yaml with test-sized hashing."""
    return {
        "uploads": {"max_assets": 12, "max_asset_bytes": 10 * 1024 * 1024},
        "review": {
            "moderator_view": "all",
            "require_moderator": False,
            "trust_query_principal": True,
        },
        "assets": {"base_url": "/static/uploads/"},
        "auth": {
            "login_success_url": "/static/index.html",
            "login_failure_url": "/static/login.html",
            "bcrypt_rounds": TEST_BCRYPT_ROUNDS,
        },
    }


@pytest.fixture
def mock_submission_store() -> MagicMock:
    """ISubmissionProvider double with empty defaults."""
    store = MagicMock()
    store.get_provider_name.return_value = "mock_submission"
    store.create = AsyncMock()
    store.list_all = AsyncMock(return_value=[])
    store.list_by_owner = AsyncMock(return_value=[])
    store.update_status = AsyncMock(return_value=None)
    store.delete = AsyncMock(return_value=False)
    return store


@pytest.fixture
def mock_blob_store() -> MagicMock:
    """IBlobProvider double that stores every key as requested."""
    blobs = MagicMock()
    blobs.get_provider_name.return_value = "mock_blob"
    blobs.put = AsyncMock(side_effect=lambda key, data: key)
    return blobs


def make_record(
    record_id: str = "rec-001",
    owner_id: str = "u1",
    status: ApprovalStatus = ApprovalStatus.PENDING,
    **kwargs: Any,
) -> SubmissionRecord:
    """Build a SubmissionRecord with sensible test defaults."""
    fields: dict[str, Any] = {
        "name": "Cats",
        "description": "Assorted cats",
        "asset_refs": ["1700000000000.png"],
        "tags": ["cat", "cute"],
        "events": None,
        "lifespan": None,
        "location": None,
        "created_at": "2025-06-15T12:00:00+00:00",
        "moderated_at": None,
    }
    fields.update(kwargs)
    return SubmissionRecord(id=record_id, owner_id=owner_id, approval_status=status, **fields)


def make_asset(filename: str = "cat.png", data: bytes = b"\x89PNG fake") -> UploadedAsset:
    return UploadedAsset(filename=filename, content_type="image/png", data=data)


# ---------------------------------------------------------------------------
# Application fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app_context(test_settings: Settings, policy_config: dict[str, Any]):
    """ServiceContext wired to temp storage."""
    from stickerpacks.context import build_context

    return build_context(test_settings, policy_config)


@pytest.fixture
def client(app_context):
    """TestClient with the lifespan running (schemas and upload dir created)."""
    from fastapi.testclient import TestClient

    from stickerpacks.main import create_app

    with TestClient(create_app(app_context)) as c:
        yield c


def register_user(
    context,
    username: str,
    role: str = "submitter",
    password: str = "pw",
    display_name: str = "",
):
    """Create a user synchronously; call only after the client lifespan started."""
    return asyncio.run(
        context.auth.register(username, password, role=role, display_name=display_name)
    )


def login_as(client, context, principal) -> None:
    """Attach a signed session cookie for ``principal`` to the client."""
    from stickerpacks.api.session import COOKIE_NAME, create_session_cookie

    client.cookies.set(
        COOKIE_NAME,
        create_session_cookie(context.session_secret, principal.id, principal.role),
    )
