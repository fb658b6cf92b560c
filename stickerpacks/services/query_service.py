"""Listing rules for sticker pack submissions.

Who sees what:

- a submitter with an id sees every record they own, in any status;
- a moderator sees all records, or only pending ones when the service
  is configured with ``ModeratorView.PENDING_ONLY``;
- anyone else gets an empty list (never an error).

The public feed (approved only) is separate.  Ordering is whatever the
store returns, which is insertion order for the SQLite adapter.
"""

from __future__ import annotations

from enum import Enum

import structlog

from stickerpacks.interfaces.submission_provider import ISubmissionProvider
from stickerpacks.models.submission import ApprovalStatus, SubmissionRecord
from stickerpacks.models.user import UserRole
from stickerpacks.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


class ModeratorView(str, Enum):
    """Which records a moderator listing includes."""

    ALL = "all"
    PENDING_ONLY = "pending_only"


def parse_moderator_view(value: str | ModeratorView) -> ModeratorView:
    """Parse a config value, raising ConfigurationError on anything unknown."""
    try:
        return ModeratorView(value)
    except ValueError as exc:
        allowed = ", ".join(v.value for v in ModeratorView)
        raise ConfigurationError(
            f"review.moderator_view must be one of: {allowed} (got {value!r})"
        ) from exc


class QueryService:
    """Role-aware record listing."""

    def __init__(
        self,
        *,
        submission_store: ISubmissionProvider,
        moderator_view: ModeratorView = ModeratorView.ALL,
    ) -> None:
        self._store = submission_store
        self._moderator_view = parse_moderator_view(moderator_view)

    @property
    def moderator_view(self) -> ModeratorView:
        return self._moderator_view

    async def list(
        self,
        caller_role: UserRole | str | None,
        caller_id: str | None = None,
    ) -> list[SubmissionRecord]:
        """Return the records visible to a caller."""
        role = self._resolve_role(caller_role)

        if role == UserRole.SUBMITTER and caller_id:
            return await self._store.list_by_owner(caller_id)

        if role == UserRole.MODERATOR:
            if self._moderator_view == ModeratorView.PENDING_ONLY:
                return await self._store.list_all(ApprovalStatus.PENDING)
            return await self._store.list_all()

        logger.debug("listing_unresolved_caller", role=caller_role, has_id=bool(caller_id))
        return []

    async def list_public(self) -> list[SubmissionRecord]:
        """Return approved records only."""
        return await self._store.list_all(ApprovalStatus.APPROVED)

    @staticmethod
    def _resolve_role(caller_role: UserRole | str | None) -> UserRole | None:
        if caller_role is None:
            return None
        try:
            return UserRole(caller_role)
        except ValueError:
            return None
