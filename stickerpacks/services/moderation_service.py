"""Moderation state machine for sticker pack submissions.

States::

    pending ──► approved ◄──► rejected
       └──────────────────────►┘

``pending`` is reachable only by creation.  ``approved`` and ``rejected``
may be re-set by any later moderator action; re-applying the current
status returns the record unchanged.  Each transition is one atomic
store update, so concurrent actions on one record are last-writer-wins.
"""

from __future__ import annotations

import structlog

from stickerpacks.interfaces.submission_provider import ISubmissionProvider
from stickerpacks.models.submission import ApprovalStatus, SubmissionRecord
from stickerpacks.utils.errors import NotFoundError, ValidationError, ValidationReason

logger = structlog.get_logger(logger_name=__name__)

TRANSITION_TARGETS = frozenset({ApprovalStatus.APPROVED, ApprovalStatus.REJECTED})


class ModerationService:
    """Applies approval transitions and hard deletes."""

    def __init__(self, *, submission_store: ISubmissionProvider) -> None:
        self._store = submission_store

    async def transition(
        self, record_id: str, target: ApprovalStatus | str
    ) -> SubmissionRecord:
        """Move a record to ``approved`` or ``rejected``.

        Raises
        ------
        ValidationError
            ``target`` is not one of approved / rejected.
        NotFoundError
            No record has ``record_id``; nothing is mutated.
        """
        status = self._coerce_target(target)

        record = await self._store.update_status(record_id, status)
        if record is None:
            raise NotFoundError("stickerpack", record_id)

        logger.info(
            "submission_transitioned",
            record_id=record_id,
            status=record.approval_status.value,
        )
        return record

    async def approve(self, record_id: str) -> SubmissionRecord:
        return await self.transition(record_id, ApprovalStatus.APPROVED)

    async def reject(self, record_id: str) -> SubmissionRecord:
        return await self.transition(record_id, ApprovalStatus.REJECTED)

    async def delete(self, record_id: str) -> None:
        """Hard-delete a record.  Its blobs are left in place."""
        if not await self._store.delete(record_id):
            raise NotFoundError("stickerpack", record_id)
        logger.info("submission_deleted", record_id=record_id)

    @staticmethod
    def _coerce_target(target: ApprovalStatus | str) -> ApprovalStatus:
        try:
            status = ApprovalStatus(target)
        except ValueError:
            status = None
        if status not in TRANSITION_TARGETS:
            raise ValidationError(
                ValidationReason.INVALID_TRANSITION,
                message=f"Cannot transition a submission to {target!r}",
            )
        return status
