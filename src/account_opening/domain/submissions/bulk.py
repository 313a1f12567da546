"""List-style operations: filtered export and purge by status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Final

from account_opening.domain.access import Action, can_access_submission, effective_branch_filter
from account_opening.domain.errors import ValidationError
from account_opening.domain.model import (
    ActivityAction,
    ActivityLogEntry,
    SubmissionStatus,
    utc_now,
)

if TYPE_CHECKING:
    from datetime import date

    from account_opening.domain.model import Actor, Clock, Submission
    from account_opening.domain.ports import SubmissionUnitOfWorkFactory

log = getLogger(__name__)

ALL_STATUSES: Final[str] = "all"


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive calendar-day range in UTC; either bound may be open."""

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValidationError(f"Date range starts after it ends: {self.start} > {self.end}")

    @property
    def start_at(self) -> datetime | None:
        if self.start is None:
            return None
        return datetime.combine(self.start, time.min, tzinfo=UTC)

    @property
    def end_before(self) -> datetime | None:
        if self.end is None:
            return None
        return datetime.combine(self.end + timedelta(days=1), time.min, tzinfo=UTC)


@dataclass(frozen=True, slots=True)
class DeleteResult:
    deleted_count: int


def export_filtered(
    actor: Actor,
    date_range: DateRange | None = None,
    branch_filter: int | None = None,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory,
) -> list[Submission]:
    """Complete aggregates created inside ``date_range`` that ``actor`` may export."""

    branch_id = effective_branch_filter(actor, Action.EXPORT, branch_filter)
    window = date_range or DateRange()
    with unit_of_work_factory() as uow:
        submissions = uow.repositories.submissions.list_created_between(
            start=window.start_at, end=window.end_before, branch_id=branch_id
        )
    exported = [s for s in submissions if can_access_submission(actor, Action.EXPORT, s)]
    log.info(f"Exported {len(exported)} submission(s) for {actor.label} (branch={branch_id})")
    return exported


def parse_status_filter(value: str | SubmissionStatus) -> tuple[SubmissionStatus, ...]:
    if isinstance(value, SubmissionStatus):
        return (value,)
    text = value.strip().lower()
    if text == ALL_STATUSES:
        return tuple(SubmissionStatus)
    try:
        return (SubmissionStatus(text),)
    except ValueError as exc:
        raise ValidationError(f"Unknown status filter {value!r}") from exc


def delete_by_status(
    status_filter: str | SubmissionStatus,
    branch_filter: int | None,
    actor: Actor,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory,
    clock: Clock = utc_now,
) -> DeleteResult:
    """Hard-delete matching submissions with every dependent row in one transaction.

    Records the actor may not delete (for instance ones owned by a global admin
    when the actor is a branch admin) are left in place.
    """

    statuses = parse_status_filter(status_filter)
    branch_id = effective_branch_filter(actor, Action.DELETE, branch_filter)
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        candidates = repositories.submissions.list_by_status(statuses, branch_id=branch_id)
        ids = [
            s.id
            for s in candidates
            if s.id is not None and can_access_submission(actor, Action.DELETE, s)
        ]
        deleted = repositories.submissions.delete_many(ids)
        if deleted:
            repositories.activity_log.add(
                ActivityLogEntry(
                    action=ActivityAction.DELETE_SUBMISSIONS,
                    description=(
                        f"Deleted {deleted} submission(s) with status "
                        f"{'/'.join(statuses)} (branch={branch_id or 'all'})"
                    ),
                    actor_id=actor.id,
                    actor_label=actor.label,
                    branch_id=branch_id,
                    created_at=clock(),
                )
            )
        uow.commit()

    log.info(
        f"Deleted {deleted} of {len(candidates)} submission(s) with status "
        f"{'/'.join(statuses)} for {actor.label}"
    )
    return DeleteResult(deleted_count=deleted)
