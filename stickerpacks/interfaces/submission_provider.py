"""Abstract interface for sticker pack submission storage.

# ─── DESIGN RATIONALE ────────────────────────────────────────────────
#
# The submission store is the only shared mutable resource in the
# service.  Every mutation is one atomic operation at the store:
#
#   create()        : a single INSERT; status is always ``pending``
#   update_status() : a single conditional UPDATE keyed by id that
#                      returns the post-update row
#   delete()        : a single DELETE keyed by id
#
# No read-modify-write across two round trips.  Concurrent status
# updates on the same record are last-writer-wins at this boundary.
#
# Layer: Interfaces (depended on by Services and Providers)
# ─────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stickerpacks.models.submission import ApprovalStatus, SubmissionDraft, SubmissionRecord


class ISubmissionProvider(ABC):
    """Abstract base class for submission record storage."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create storage schema if it doesn't exist (idempotent)."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logs and error messages."""

    @abstractmethod
    async def create(self, draft: SubmissionDraft) -> SubmissionRecord:
        """Persist a new record with status ``pending`` and return it.

        Parameters
        ----------
        draft:
            Normalized submission.  The store assigns ``id`` and
            ``created_at``.

        Returns
        -------
        SubmissionRecord
            The stored record.
        """

    @abstractmethod
    async def list_all(self, status: ApprovalStatus | None = None) -> list[SubmissionRecord]:
        """Return all records (optionally only one status) in insertion order."""

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> list[SubmissionRecord]:
        """Return every record owned by ``owner_id`` in insertion order."""

    @abstractmethod
    async def update_status(
        self, record_id: str, status: ApprovalStatus
    ) -> SubmissionRecord | None:
        """Atomically set the approval status.

        Returns the post-update record, or None when no record matched.
        """

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Hard-delete a record.  Returns True if a row was removed."""
