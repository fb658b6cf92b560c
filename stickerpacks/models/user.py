"""User principal models.

The credential hash never appears on these models; it stays inside the
user store and is only compared by :class:`~stickerpacks.services.auth_service.AuthService`.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """Roles a principal can hold."""

    SUBMITTER = "submitter"
    MODERATOR = "moderator"


class UserPrincipal(BaseModel):
    """A registered user, without credentials."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    role: UserRole = UserRole.SUBMITTER
    display_name: str = ""


class Caller(BaseModel):
    """The identity resolved for the current request.

    Both fields are ``None`` for an anonymous caller.
    """

    model_config = ConfigDict(frozen=True)

    role: UserRole | None = Field(default=None)
    user_id: str | None = Field(default=None)

    @property
    def is_moderator(self) -> bool:
        return self.role == UserRole.MODERATOR
