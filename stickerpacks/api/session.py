"""HMAC-signed session cookie utilities.

# ─── HOW SESSION COOKIES WORK ────────────────────────────────────────
#
# Login issues a signed cookie instead of a server-side session row, so
# resolving the caller needs no database round trip.
#
# Cookie format:  {user_id}:{role}:{issued_ts}:{hmac_hex}
#   - user_id:   UserPrincipal.id (uuid hex, never contains ':')
#   - role:      "submitter" | "moderator"
#   - issued_ts: UTC epoch seconds when the cookie was issued
#   - hmac:      HMAC-SHA256(secret, "{user_id}:{role}:{issued_ts}")
#
# Validation: four fields, known role, integer timestamp inside the TTL
# window, signature equal in constant time.
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import hashlib
import hmac
import time

from stickerpacks.models.user import Caller, UserRole

COOKIE_NAME = "stickerpacks_session"


def _sign(secret: str, payload: str) -> str:
    return hmac.new(
        secret.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def create_session_cookie(
    secret: str,
    user_id: str,
    role: UserRole | str,
    issued_at: int | None = None,
) -> str:
    """Create a signed session cookie value for a principal.

    Parameters
    ----------
    secret:
        Signing secret shared by every worker.
    user_id:
        Principal id; must not contain ``:``.
    role:
        Principal role.
    issued_at:
        Epoch seconds; defaults to now.

    Returns
    -------
    Cookie string in the format ``{user_id}:{role}:{ts}:{hmac_hex}``.
    """
    if not user_id or ":" in user_id:
        raise ValueError(f"Invalid user id for session cookie: {user_id!r}")
    role_value = UserRole(role).value
    timestamp = int(time.time()) if issued_at is None else issued_at
    payload = f"{user_id}:{role_value}:{timestamp}"
    return f"{payload}:{_sign(secret, payload)}"


def read_session_cookie(
    cookie: str,
    secret: str,
    ttl_hours: int = 168,
) -> Caller | None:
    """Validate a session cookie and return the caller it names.

    Returns None for a missing, malformed, expired or forged cookie.
    """
    if not cookie or not secret:
        return None

    parts = cookie.split(":")
    if len(parts) != 4:
        return None
    user_id, role_value, timestamp_str, provided = parts

    try:
        role = UserRole(role_value)
        timestamp = int(timestamp_str)
    except ValueError:
        return None

    if time.time() - timestamp > ttl_hours * 3600:
        return None

    expected = _sign(secret, f"{user_id}:{role_value}:{timestamp_str}")
    if not hmac.compare_digest(provided, expected):
        return None

    return Caller(role=role, user_id=user_id)
