"""Status transitions and the notification they trigger."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from account_opening.domain.access import Action, ensure_submission_access
from account_opening.domain.errors import InvalidStateError, NotFoundError
from account_opening.domain.model import NotificationKind, SubmissionStatus, utc_now

if TYPE_CHECKING:
    from account_opening.domain.model import Actor, Clock, Submission
    from account_opening.domain.ports import Notifier, SubmissionUnitOfWorkFactory

log = getLogger(__name__)

_NOTIFIED: dict[SubmissionStatus, NotificationKind] = {
    SubmissionStatus.APPROVED: NotificationKind.APPROVED,
    SubmissionStatus.REJECTED: NotificationKind.REJECTED,
}


def parse_status(value: str | SubmissionStatus) -> SubmissionStatus:
    try:
        return SubmissionStatus(str(value).strip().lower())
    except ValueError as exc:
        raise InvalidStateError(f"Unknown submission status {value!r}") from exc


def set_submission_status(
    submission_id: int,
    status: str | SubmissionStatus,
    actor: Actor,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory,
    notifier: Notifier | None = None,
    clock: Clock = utc_now,
    message: str | None = None,
) -> Submission:
    """Move a submission to ``status`` and notify the customer afterwards.

    Approval and rejection stamps are exclusive; a content-edited submission
    can no longer return to pending. The notifier runs after the commit and its
    failures are logged, never raised.
    """

    new_status = parse_status(status)
    with unit_of_work_factory() as uow:
        submission = uow.repositories.submissions.get(submission_id)
        if submission is None:
            raise NotFoundError(f"Submission {submission_id} not found")
        ensure_submission_access(actor, Action.SET_STATUS, submission)
        previous = submission.status
        submission.change_status(new_status, by=actor.label, at=clock())
        uow.commit()

    log.info(
        f"Submission {submission.reference_code} moved from {previous} to {new_status} "
        f"by {actor.label}"
    )
    if notifier is not None and new_status in _NOTIFIED:
        _notify(notifier, submission, _NOTIFIED[new_status], message)
    return submission


def _notify(
    notifier: Notifier,
    submission: Submission,
    kind: NotificationKind,
    message: str | None,
) -> None:
    payload: dict[str, object] = {
        "name": submission.personal.name,
        "reference_code": submission.reference_code,
        "branch_id": submission.branch_id,
    }
    if message:
        payload["message"] = message
    try:
        notifier.notify(submission.personal.phone, kind, payload)
    except Exception:  # noqa: BLE001
        log.exception(f"Failed to send {kind} notification for {submission.reference_code}")
