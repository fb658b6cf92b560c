"""Abstract interface for the user principal store."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stickerpacks.models.user import UserPrincipal, UserRole


class IUserProvider(ABC):
    """Abstract base class for user storage.

    Credential hashes are opaque strings to the provider; hashing and
    verification belong to the auth service.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create storage schema if it doesn't exist (idempotent)."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logs and error messages."""

    @abstractmethod
    async def create_user(
        self,
        username: str,
        credential_hash: str,
        role: UserRole,
        display_name: str = "",
    ) -> UserPrincipal:
        """Insert a user.  Raises ValidationError(DUPLICATE_USER) on a taken username."""

    @abstractmethod
    async def get_user(self, user_id: str) -> UserPrincipal | None:
        """Return a user by id, or None."""

    @abstractmethod
    async def get_credentials(self, username: str) -> tuple[UserPrincipal, str] | None:
        """Return ``(principal, credential_hash)`` for a username, or None."""

    @abstractmethod
    async def list_users(self) -> list[UserPrincipal]:
        """Return all users in creation order."""
