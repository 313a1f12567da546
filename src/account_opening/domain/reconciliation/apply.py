"""Apply pass of a batch import.

Records are processed one by one, each in its own transaction: a failing
record is counted as skipped and never rolls back the records before it.
Progress snapshots go to a TTL-bound ledger keyed by the caller's progress key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Final

from account_opening.domain.access import (
    Action,
    ensure_allowed,
    ensure_submission_access,
    is_allowed,
)
from account_opening.domain.errors import (
    AccessDeniedError,
    AccountOpeningError,
    ConflictBlockedError,
    NotFoundError,
    ValidationError,
)
from account_opening.domain.model import (
    ActivityAction,
    ActivityLogEntry,
    SubmissionStatus,
    utc_now,
)
from account_opening.domain.submissions import create_submission

from .classify import canonicalize, classify_record
from .contracts import Classification, ImportResult, ProgressSnapshot, SkippedRecord

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from account_opening.domain.fields import CanonicalRecord
    from account_opening.domain.model import Actor, Clock
    from account_opening.domain.ports import (
        ProgressLedger,
        SubmissionRepositories,
        SubmissionUnitOfWorkFactory,
    )

log = getLogger(__name__)

SESSION_NOT_FOUND: Final[str] = "Session not found"
DEFAULT_PROGRESS_TTL: Final[timedelta] = timedelta(minutes=30)
DEFAULT_PROGRESS_GRACE: Final[timedelta] = timedelta(seconds=60)


@dataclass(slots=True)
class BatchImporter:
    """Best-effort batch import with per-record isolation."""

    unit_of_work_factory: SubmissionUnitOfWorkFactory
    ledger: ProgressLedger
    clock: Clock = field(default=utc_now)
    progress_ttl: timedelta = DEFAULT_PROGRESS_TTL
    progress_grace: timedelta = DEFAULT_PROGRESS_GRACE
    progress_interval: int = 1

    def apply(
        self,
        records: Sequence[Mapping[str, object]],
        actor: Actor,
        *,
        overwrite: bool = False,
        progress_key: str | None = None,
    ) -> ImportResult:
        ensure_allowed(actor, Action.IMPORT)
        total = len(records)
        result = ImportResult(total=total)
        log.info(
            f"Starting import of {total} record(s) by {actor.label} "
            f"(overwrite={overwrite}, key={progress_key})"
        )
        self._publish(progress_key, 0, f"Starting import of {total} record(s)", self.progress_ttl)

        try:
            for index, raw in enumerate(records):
                self._apply_record(index, raw, actor, overwrite=overwrite, result=result)
                done = index + 1
                if done < total and done % max(self.progress_interval, 1) == 0:
                    self._publish(
                        progress_key,
                        _percent(done, total),
                        f"Processed {done} of {total} record(s)",
                        self.progress_ttl,
                    )
        except Exception:
            self._publish(
                progress_key,
                _percent(result.processed, total),
                f"Import failed after {result.processed} of {total} record(s)",
                self.progress_grace,
            )
            raise

        self._publish(
            progress_key,
            100,
            f"Import finished: {result.imported} imported, {result.overwritten} overwritten, "
            f"{result.skipped} skipped",
            self.progress_grace,
        )
        self._record_summary(actor, result, overwrite=overwrite)
        log.info(f"Finished import: {result.as_dict()}")
        return result

    def get_progress(self, progress_key: str) -> ProgressSnapshot:
        snapshot = self.ledger.get(progress_key)
        if snapshot is None:
            return default_progress_snapshot(self.clock())
        return snapshot

    # Per record ------------------------------------------------------------

    def _apply_record(
        self,
        index: int,
        raw: Mapping[str, object],
        actor: Actor,
        *,
        overwrite: bool,
        result: ImportResult,
    ) -> None:
        identity_number: str | None = None
        try:
            record = canonicalize(raw)
            identity_number = record.identity_number
            if not is_allowed(actor, Action.IMPORT, branch_id=record.branch_id):
                raise AccessDeniedError(
                    f"Record belongs to branch {record.branch_id}, outside branch "
                    f"{actor.branch_id}"
                )

            with self.unit_of_work_factory() as uow:
                classified = classify_record(record, uow.repositories.submissions)

            match classified.classification:
                case Classification.INVALID:
                    raise ValidationError(classified.reason or "Invalid record")
                case Classification.BLOCKED:
                    raise ConflictBlockedError(classified.reason or "Blocked by active record")
                case Classification.NEW:
                    create_submission(
                        record,
                        actor,
                        unit_of_work_factory=self.unit_of_work_factory,
                        clock=self.clock,
                        carry_status=True,
                    )
                    result.imported += 1
                case Classification.REPLACEABLE if not overwrite:
                    _skip(
                        result, index, identity_number, "Rejected record exists; overwrite is off"
                    )
                case Classification.REPLACEABLE:
                    if classified.target is None or classified.target.id is None:
                        raise NotFoundError("Replaceable record has no target")
                    self._overwrite(classified.target.id, record, actor)
                    result.overwritten += 1
        except AccountOpeningError as exc:
            log.warning(f"Skipping import record {index} ({identity_number}): {exc}")
            _skip(result, index, identity_number, f"{exc.kind}: {exc}")
        except Exception as exc:
            log.exception(f"Unexpected failure on import record {index} ({identity_number})")
            _skip(result, index, identity_number, f"internal: {exc}")

    def _overwrite(self, submission_id: int, record: CanonicalRecord, actor: Actor) -> None:
        """Replace status and approval metadata only; child data stays untouched."""

        now = self.clock()
        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            submission = repositories.submissions.get(submission_id)
            if submission is None:
                raise NotFoundError(f"Submission {submission_id} not found")
            ensure_submission_access(actor, Action.IMPORT, submission)
            if submission.is_active:
                raise ConflictBlockedError(
                    f"Submission {submission.reference_code} became {submission.status}"
                )
            status = record.status or SubmissionStatus.PENDING
            if status is SubmissionStatus.APPROVED:
                named, at = record.get("approved_by"), record.get("approved_at")
            elif status is SubmissionStatus.REJECTED:
                named, at = record.get("rejected_by"), record.get("rejected_at")
            else:
                named, at = None, None
            submission.change_status(
                status,
                by=_resolve_approver(repositories, named, actor),
                at=at or now,  # type: ignore[arg-type]
            )
            uow.commit()
        log.info(f"Overwrote status of {submission.reference_code} with {status}")

    # Bookkeeping -----------------------------------------------------------

    def _publish(self, key: str | None, progress: int, message: str, ttl: timedelta) -> None:
        if key is None:
            return
        snapshot = ProgressSnapshot(progress=progress, message=message, timestamp=self.clock())
        self.ledger.set(key, snapshot, ttl)

    def _record_summary(self, actor: Actor, result: ImportResult, *, overwrite: bool) -> None:
        with self.unit_of_work_factory() as uow:
            uow.repositories.activity_log.add(
                ActivityLogEntry(
                    action=ActivityAction.IMPORT_SUBMISSIONS,
                    description=(
                        f"Imported {result.imported}, overwrote {result.overwritten}, "
                        f"skipped {result.skipped} of {result.total} record(s)"
                        f"{' (overwrite mode)' if overwrite else ''}"
                    ),
                    actor_id=actor.id,
                    actor_label=actor.label,
                    branch_id=actor.branch_id,
                    created_at=self.clock(),
                )
            )
            uow.commit()


def _percent(done: int, total: int) -> int:
    if total <= 0:
        return 100
    return min(100, done * 100 // total)


def _skip(result: ImportResult, index: int, identity_number: str | None, reason: str) -> None:
    result.skipped += 1
    result.skipped_records.append(
        SkippedRecord(index=index, identity_number=identity_number, reason=reason)
    )


def _resolve_approver(
    repositories: SubmissionRepositories, named: object, actor: Actor
) -> str:
    """Use the named staff account when it exists here, else the acting actor."""

    if isinstance(named, str) and named:
        staff = repositories.staff.get_by_username(named)
        if staff is not None:
            return staff.username
        log.debug(f"Approver {named!r} is unknown here; stamping {actor.label} instead")
    return actor.label


def default_progress_snapshot(now: datetime) -> ProgressSnapshot:
    return ProgressSnapshot(progress=0, message=SESSION_NOT_FOUND, timestamp=now)
