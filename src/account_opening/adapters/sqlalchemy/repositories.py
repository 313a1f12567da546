"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, select

from account_opening.adapters.sqlalchemy.mappings import (
    SUBMISSION_CHILD_TABLES,
    activity_log_table,
    audit_entry_table,
    personal_profile_table,
    staff_account_table,
    submission_table,
)
from account_opening.domain.model import (
    ACTIVE_STATUSES,
    ActivityLogEntry,
    AuditEntry,
    Branch,
    StaffAccount,
    Submission,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from datetime import datetime

    from sqlalchemy import Select
    from sqlalchemy.orm import Session

    from account_opening.domain.model import SubmissionStatus


class SqlAlchemySubmissionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Submission) -> None:
        self.session.add(entity)

    def get(self, submission_id: int) -> Submission | None:
        return self.session.get(Submission, submission_id)

    def find_by_identity_number(self, identity_number: str) -> list[Submission]:
        stmt = (
            self._select_by_identity(identity_number)
            .order_by(submission_table.c.created_at.desc(), submission_table.c.id.desc())
        )
        return list(self.session.scalars(stmt))

    def has_active_identity(self, identity_number: str, *, exclude_id: int | None = None) -> bool:
        condition = (
            select(submission_table.c.id)
            .join(
                personal_profile_table,
                personal_profile_table.c.submission_id == submission_table.c.id,
            )
            .where(personal_profile_table.c.identity_number == identity_number)
            .where(submission_table.c.status.in_(sorted(ACTIVE_STATUSES)))
        )
        if exclude_id is not None:
            condition = condition.where(submission_table.c.id != exclude_id)
        return bool(self.session.scalar(select(condition.exists())))

    def list_created_between(
        self,
        *,
        start: datetime | None,
        end: datetime | None,
        branch_id: int | None,
    ) -> list[Submission]:
        stmt = select(Submission)
        if start is not None:
            stmt = stmt.where(submission_table.c.created_at >= start)
        if end is not None:
            stmt = stmt.where(submission_table.c.created_at < end)
        if branch_id is not None:
            stmt = stmt.where(submission_table.c.branch_id == branch_id)
        stmt = stmt.order_by(submission_table.c.created_at, submission_table.c.id)
        return list(self.session.scalars(stmt))

    def list_by_status(
        self, statuses: Collection[SubmissionStatus], *, branch_id: int | None
    ) -> list[Submission]:
        stmt = select(Submission).where(submission_table.c.status.in_(list(statuses)))
        if branch_id is not None:
            stmt = stmt.where(submission_table.c.branch_id == branch_id)
        return list(self.session.scalars(stmt.order_by(submission_table.c.id)))

    def delete_many(self, submission_ids: Sequence[int]) -> int:
        if not submission_ids:
            return 0
        ids = list(submission_ids)
        # Loaded instances would otherwise be flushed back after the bulk delete.
        loaded = [
            instance
            for instance in list(self.session.identity_map.values())
            if isinstance(instance, Submission) and instance.id in ids
        ]
        for submission in loaded:
            self.session.expunge(submission)
        for table in SUBMISSION_CHILD_TABLES:
            self.session.execute(delete(table).where(table.c.submission_id.in_(ids)))
        result = self.session.execute(
            delete(submission_table).where(submission_table.c.id.in_(ids))
        )
        return result.rowcount

    def _select_by_identity(self, identity_number: str) -> Select[tuple[Submission]]:
        return (
            select(Submission)
            .join(
                personal_profile_table,
                personal_profile_table.c.submission_id == submission_table.c.id,
            )
            .where(personal_profile_table.c.identity_number == identity_number)
        )


class SqlAlchemyAuditEntryRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: AuditEntry) -> None:
        self.session.add(entity)

    def list_for_submission(self, submission_id: int) -> list[AuditEntry]:
        stmt = (
            select(AuditEntry)
            .where(audit_entry_table.c.submission_id == submission_id)
            .order_by(audit_entry_table.c.created_at.desc(), audit_entry_table.c.id.desc())
        )
        return list(self.session.scalars(stmt))


class SqlAlchemyActivityLogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ActivityLogEntry) -> None:
        self.session.add(entity)

    def list_recent(self, *, limit: int = 50) -> list[ActivityLogEntry]:
        stmt = (
            select(ActivityLogEntry)
            .order_by(activity_log_table.c.created_at.desc(), activity_log_table.c.id.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))


class SqlAlchemyBranchRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Branch) -> None:
        self.session.add(entity)

    def get(self, branch_id: int) -> Branch | None:
        return self.session.get(Branch, branch_id)


class SqlAlchemyStaffAccountRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: StaffAccount) -> None:
        self.session.add(entity)

    def get_by_username(self, username: str) -> StaffAccount | None:
        stmt = select(StaffAccount).where(staff_account_table.c.username == username)
        return self.session.scalars(stmt).one_or_none()
