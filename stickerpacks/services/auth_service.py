"""Credential hashing and login checks.

Credentials are stored as bcrypt hashes produced by passlib.  The cost
factor comes from ``auth.bcrypt_rounds`` in config.yaml.
"""

from __future__ import annotations

import structlog
from passlib.hash import bcrypt

from stickerpacks.interfaces.user_provider import IUserProvider
from stickerpacks.models.user import UserPrincipal, UserRole
from stickerpacks.utils.errors import ValidationError, ValidationReason

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_BCRYPT_ROUNDS = 12


def hash_credential(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password with a fresh random salt."""
    return bcrypt.using(rounds=rounds).hash(password)


def verify_credential(password: str, encoded: str) -> bool:
    """Check a password against a stored hash.  Malformed hashes never match."""
    if not encoded or not bcrypt.identify(encoded):
        return False
    try:
        return bcrypt.verify(password, encoded)
    except ValueError:
        logger.warning("credential_hash_malformed")
        return False


class AuthService:
    """Registers users and checks their credentials."""

    def __init__(
        self,
        *,
        user_store: IUserProvider,
        rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ) -> None:
        self._users = user_store
        self._rounds = rounds

    async def register(
        self,
        username: str,
        password: str,
        role: UserRole | str = UserRole.SUBMITTER,
        display_name: str = "",
    ) -> UserPrincipal:
        """Create a user.  Raises ValidationError for blank input or a taken username."""
        username = username.strip()
        if not username or not password:
            raise ValidationError(
                ValidationReason.MISSING_CREDENTIALS,
                message="Username and password are required",
            )
        return await self._users.create_user(
            username=username,
            credential_hash=hash_credential(password, self._rounds),
            role=UserRole(role),
            display_name=display_name,
        )

    async def authenticate(self, username: str, password: str) -> UserPrincipal | None:
        """Return the principal for valid credentials, else None."""
        found = await self._users.get_credentials(username.strip())
        if found is None:
            logger.info("login_failed", reason="unknown_user")
            return None

        principal, encoded = found
        if not verify_credential(password, encoded):
            logger.info("login_failed", reason="bad_credentials", user_id=principal.id)
            return None

        logger.info("login_succeeded", user_id=principal.id, role=principal.role.value)
        return principal

    async def get_user(self, user_id: str) -> UserPrincipal | None:
        return await self._users.get_user(user_id)

    async def list_users(self) -> list[UserPrincipal]:
        return await self._users.list_users()
