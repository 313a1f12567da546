"""Read side of the audit trail."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from account_opening.domain.access import Action, ensure_submission_access
from account_opening.domain.errors import NotFoundError

if TYPE_CHECKING:
    from datetime import datetime

    from account_opening.domain.model import Actor, AuditEntry
    from account_opening.domain.ports import SubmissionUnitOfWorkFactory


@dataclass(frozen=True, slots=True)
class ApproverStamp:
    name: str | None
    at: datetime | None


@dataclass(frozen=True, slots=True)
class SubmissionHistory:
    submission_id: int
    reference_code: str
    current_approver: ApproverStamp
    original_approver: ApproverStamp
    edit_count: int
    entries: tuple[AuditEntry, ...]


def get_history(
    submission_id: int,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory,
    actor: Actor | None = None,
) -> SubmissionHistory:
    """Approvers and audit entries of a submission, most recent entry first."""

    with unit_of_work_factory() as uow:
        submission = uow.repositories.submissions.get(submission_id)
        if submission is None:
            raise NotFoundError(f"Submission {submission_id} not found")
        if actor is not None:
            ensure_submission_access(actor, Action.VIEW, submission)
        entries = uow.repositories.audit_entries.list_for_submission(submission_id)

    current = ApproverStamp(name=submission.approved_by, at=submission.approved_at)
    if submission.original_approved_by is not None:
        original = ApproverStamp(
            name=submission.original_approved_by, at=submission.original_approved_at
        )
    else:
        original = current
    return SubmissionHistory(
        submission_id=submission_id,
        reference_code=submission.reference_code,
        current_approver=current,
        original_approver=original,
        edit_count=submission.edit_count,
        entries=tuple(entries),
    )
